from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Protocol

import yaml

from brevo_platform.errors import ConfigError

# Option names used by the Brevo WordPress plugin.
API_KEY_OPTION = "sib_api_key_v3"
SENDER_OPTION = "sib_home_option"

BASE_URL_OPTION = "brevo_base_url"
TIMEOUT_OPTION = "brevo_timeout"

DEFAULT_BASE_URL = "https://api.brevo.com/v3/"
DEFAULT_TIMEOUT = 30.0

API_KEY_ENV = "BREVO_API_KEY"


class ConfigStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...


class DictConfigStore:
    """Read-only key/value store populated once at startup."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)


class YamlConfigStore(DictConfigStore):
    @classmethod
    def from_path(
        cls,
        path: Path,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "YamlConfigStore":
        if not path.exists():
            raise ConfigError(f"Config file does not exist: {path}")

        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")

        values: Dict[str, Any] = dict(raw)
        env = os.environ if environ is None else environ
        if env.get(API_KEY_ENV):
            values[API_KEY_OPTION] = env[API_KEY_ENV]

        return cls(values)


def default_sender(config: ConfigStore) -> Optional[Dict[str, str]]:
    """Sender identity from the stored home option, if it names an email."""
    home = config.get(SENDER_OPTION, {}) or {}
    if not isinstance(home, Mapping) or not home.get("from_email"):
        return None
    return {
        "email": str(home["from_email"]),
        "name": str(home.get("from_name") or ""),
    }
