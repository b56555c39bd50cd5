from .store import (
    API_KEY_ENV,
    API_KEY_OPTION,
    BASE_URL_OPTION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    SENDER_OPTION,
    TIMEOUT_OPTION,
    ConfigStore,
    DictConfigStore,
    YamlConfigStore,
    default_sender,
)

__all__ = [
    "API_KEY_ENV",
    "API_KEY_OPTION",
    "BASE_URL_OPTION",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "SENDER_OPTION",
    "TIMEOUT_OPTION",
    "ConfigStore",
    "DictConfigStore",
    "YamlConfigStore",
    "default_sender",
]
