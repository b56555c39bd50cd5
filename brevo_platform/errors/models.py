from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    NOT_FOUND = "NOT_FOUND"
    HANDLER_REJECTED = "HANDLER_REJECTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ValidationKind:
    UNKNOWN_FIELD = "UNKNOWN_FIELD"
    MISSING_FIELD = "MISSING_FIELD"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    OUT_OF_RANGE = "OUT_OF_RANGE"


@dataclass(eq=False)
class AbilityError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message

    def to_json(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details or {},
        }


class ValidationError(AbilityError):
    """Raised by the schema validator; `kind` is one of ValidationKind."""

    def __init__(self, kind: str, field: str, message: str):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={"kind": kind, "field": field},
        )
        self.kind = kind
        self.field = field


class ConfigurationError(AbilityError):
    def __init__(self, message: str):
        super().__init__(code=ErrorCode.CONFIGURATION_ERROR, message=message)


class TransportError(AbilityError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=ErrorCode.TRANSPORT_ERROR, message=message, details=details)


class RegistryError(Exception):
    pass


class ConfigError(Exception):
    pass
