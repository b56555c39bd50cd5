from .models import (
    AbilityError,
    ConfigError,
    ConfigurationError,
    ErrorCode,
    RegistryError,
    TransportError,
    ValidationError,
    ValidationKind,
)

__all__ = [
    "AbilityError",
    "ConfigError",
    "ConfigurationError",
    "ErrorCode",
    "RegistryError",
    "TransportError",
    "ValidationError",
    "ValidationKind",
]
