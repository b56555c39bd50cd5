from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError
from jsonschema.validators import extend

from brevo_platform.errors import ValidationError, ValidationKind

from .types import FieldSpec, Schema


def _is_strict_integer(checker, instance) -> bool:
    # JSON Schema treats 1.0 as an integer; identifiers built into paths must not.
    return isinstance(instance, int) and not isinstance(instance, bool)


StrictValidator = extend(
    Draft202012Validator,
    type_checker=Draft202012Validator.TYPE_CHECKER.redefine("integer", _is_strict_integer),
)

# Lower sorts first: report unknown fields before missing ones, and so on.
_PRIORITY = {
    "additionalProperties": 0,
    "required": 1,
    "type": 2,
    "enum": 3,
    "minimum": 4,
    "maximum": 4,
}


def _clamp(spec: FieldSpec, value: Any) -> Any:
    if spec.overflow != "clamp" or not _is_strict_integer(None, value):
        return value
    if spec.maximum is not None and value > spec.maximum:
        return spec.maximum
    if spec.minimum is not None and value < spec.minimum:
        return spec.minimum
    return value


def _field_path(err: JsonSchemaValidationError, leaf: str = "") -> str:
    parts = [str(p) for p in err.path]
    if leaf:
        parts.append(leaf)
    return ".".join(parts)


def _convert(err: JsonSchemaValidationError) -> ValidationError:
    if err.validator == "additionalProperties":
        declared = err.schema.get("properties", {})
        extra = sorted(k for k in err.instance if k not in declared)
        name = _field_path(err, extra[0] if extra else "")
        return ValidationError(ValidationKind.UNKNOWN_FIELD, name, f"Unknown field '{name}'.")

    if err.validator == "required":
        missing = [r for r in err.validator_value if r not in err.instance]
        name = _field_path(err, missing[0] if missing else "")
        return ValidationError(ValidationKind.MISSING_FIELD, name, f"Missing required field '{name}'.")

    name = _field_path(err) or "parameters"

    if err.validator == "type":
        return ValidationError(
            ValidationKind.TYPE_MISMATCH,
            name,
            f"Field '{name}' must be of type {err.validator_value}.",
        )
    if err.validator == "enum":
        allowed = ", ".join(str(v) for v in err.validator_value)
        return ValidationError(
            ValidationKind.INVALID_ENUM_VALUE,
            name,
            f"Field '{name}' must be one of: {allowed}.",
        )
    if err.validator in ("minimum", "maximum"):
        op = ">=" if err.validator == "minimum" else "<="
        return ValidationError(
            ValidationKind.OUT_OF_RANGE,
            name,
            f"Field '{name}' must be {op} {err.validator_value}.",
        )
    return ValidationError(ValidationKind.TYPE_MISMATCH, name, err.message)


def validate(schema: Schema, raw_params: Any) -> Mapping[str, Any]:
    """
    Check `raw_params` against `schema` and return the validated input.

    Clamp-policy integers are capped before the bounds check, then declared
    defaults fill absent optional fields. The caller's mapping is not touched;
    the result is a read-only copy.
    """
    if raw_params is None:
        raw_params = {}
    if not isinstance(raw_params, Mapping):
        raise ValidationError(
            ValidationKind.TYPE_MISMATCH, "parameters", "Parameters must be a JSON object."
        )

    params = {}
    for name, value in raw_params.items():
        spec = schema.properties.get(name)
        params[name] = _clamp(spec, value) if spec is not None else value
    params = copy.deepcopy(params)

    errors = list(StrictValidator(schema.to_json_schema()).iter_errors(params))
    if errors:
        errors.sort(key=lambda e: (_PRIORITY.get(e.validator, 9), len(e.path), _field_path(e)))
        raise _convert(errors[0])

    for name, spec in schema.properties.items():
        if name not in params and spec.has_default:
            params[name] = copy.deepcopy(spec.default)

    return MappingProxyType(params)
