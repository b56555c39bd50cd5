from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Literal, Mapping, Optional, Tuple

FieldKind = Literal["string", "integer", "boolean", "array", "object"]
OverflowPolicy = Literal["clamp", "reject"]

KINDS = ("string", "integer", "boolean", "array", "object")


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class FieldSpec:
    """One declared parameter.

    `overflow` is the bounds policy for integer fields with a minimum/maximum:
    "clamp" caps silently, "reject" fails validation.
    """
    kind: FieldKind
    description: str = ""
    default: Any = MISSING
    enum: Optional[Tuple[Any, ...]] = None
    items: Optional["FieldSpec"] = None
    properties: Optional[Mapping[str, "FieldSpec"]] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    overflow: OverflowPolicy = "reject"

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown field kind '{self.kind}'")
        if self.overflow not in ("clamp", "reject"):
            raise ValueError(f"Unknown overflow policy '{self.overflow}'")
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))
            if self.default is not MISSING and self.default not in self.enum:
                raise ValueError(f"Default {self.default!r} is not one of {self.enum!r}")
        if self.items is not None and self.kind != "array":
            raise ValueError("Only array fields declare items")
        if self.properties is not None:
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        if self.kind != "integer" and (self.minimum is not None or self.maximum is not None):
            raise ValueError("Only integer fields declare bounds")

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def to_json_schema(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.kind}
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.items is not None:
            out["items"] = self.items.to_json_schema()
        if self.properties is not None:
            out["properties"] = {k: v.to_json_schema() for k, v in self.properties.items()}
        if self.minimum is not None:
            out["minimum"] = self.minimum
        if self.maximum is not None:
            out["maximum"] = self.maximum
        if self.has_default:
            out["default"] = self.default
        if self.description:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class Schema:
    """Object schema: declared properties, required names, extras policy."""
    properties: Mapping[str, FieldSpec] = field(default_factory=dict)
    required: FrozenSet[str] = frozenset()
    additional_properties: bool = False

    def __post_init__(self):
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        object.__setattr__(self, "required", frozenset(self.required))
        undeclared = self.required - set(self.properties)
        if undeclared:
            raise ValueError(f"Required fields not declared in properties: {sorted(undeclared)}")

    def to_json_schema(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": "object",
            "properties": {k: v.to_json_schema() for k, v in self.properties.items()},
            "additionalProperties": self.additional_properties,
        }
        if self.required:
            out["required"] = sorted(self.required)
        return out
