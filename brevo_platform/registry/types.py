from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Union

from brevo_platform.client import UpstreamRequest
from brevo_platform.config import ConfigStore
from brevo_platform.policy import PermissionRule
from brevo_platform.schema import Schema

NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*/[a-z0-9][a-z0-9-]*$")

# build_request(validated_input, config) -> request, or a finished result dict
RequestBuilder = Callable[[Mapping[str, Any], ConfigStore], Union[UpstreamRequest, Dict[str, Any]]]
# shape_result(upstream_data, validated_input) -> handler result
ResultShaper = Callable[[Any, Mapping[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class Annotations:
    readonly: bool = False
    destructive: bool = False
    idempotent: bool = False

    def to_json(self) -> Dict[str, bool]:
        return {
            "readonly": self.readonly,
            "destructive": self.destructive,
            "idempotent": self.idempotent,
        }


@dataclass(frozen=True)
class AbilityDescriptor:
    """Static definition of one ability."""
    name: str                          # e.g. "brevo/list-contacts"
    label: str
    description: str
    input_schema: Schema
    output_schema: Schema
    permission: PermissionRule
    build_request: RequestBuilder
    shape_result: ResultShaper
    annotations: Annotations = Annotations()
    category: str = "site"

    def __post_init__(self):
        if not NAME_PATTERN.match(self.name):
            raise ValueError(f"Ability name '{self.name}' must look like 'namespace/verb'")

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "category": self.category,
            "input_schema": self.input_schema.to_json_schema(),
            "output_schema": self.output_schema.to_json_schema(),
            "permission": self.permission.capability,
            "meta": {"annotations": self.annotations.to_json()},
        }
