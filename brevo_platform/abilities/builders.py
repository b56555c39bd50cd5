"""
Shared constructors for Brevo abilities.

Most abilities are one of a handful of shapes (paged listing, fetch by id,
delete by id); these helpers build the descriptor from a few parameters so
each ability reads as data.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from brevo_platform.client import UpstreamRequest
from brevo_platform.config import ConfigStore
from brevo_platform.policy import PermissionRule
from brevo_platform.registry import AbilityDescriptor, Annotations
from brevo_platform.schema import FieldSpec, Schema

READ_ONLY = Annotations(readonly=True, destructive=False, idempotent=True)
CREATE = Annotations(readonly=False, destructive=False, idempotent=False)
UPDATE = Annotations(readonly=False, destructive=False, idempotent=True)
DELETE = Annotations(readonly=False, destructive=True, idempotent=True)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

OFFSET = FieldSpec("integer", default=0, minimum=0, description="Pagination offset.")


def page_limit(default: int, maximum: Optional[int] = None, noun: str = "items") -> FieldSpec:
    """
    Page-size field. With a maximum, over-limit values are clamped to it;
    without one the value is passed through and the API applies its own cap.
    """
    if maximum is None:
        return FieldSpec("integer", default=default, description=f"Number of {noun} to return.")
    return FieldSpec(
        "integer",
        default=default,
        minimum=1,
        maximum=maximum,
        overflow="clamp",
        description=f"Number of {noun} to return (max {maximum}).",
    )


def id_field(description: str) -> FieldSpec:
    return FieldSpec("integer", minimum=1, description=description)


def path_segment(value: Any) -> str:
    return quote(str(value), safe="")


def is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def sparse(validated: Mapping[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Body with only the supplied, non-empty fields; absent ones stay untouched upstream."""
    return {k: validated[k] for k in keys if k in validated and not is_empty(validated[k])}


def clean_emails(values: Iterable[Any]) -> List[str]:
    out = []
    for value in values:
        email = str(value).strip()
        if _EMAIL_RE.match(email):
            out.append(email)
    return out


def blank_key(v: Mapping[str, Any], field_name: str) -> bool:
    value = v.get(field_name)
    return isinstance(value, str) and not value.strip()


def keyed_path(path: str, v: Mapping[str, Any], field_name: str) -> str:
    value = v[field_name]
    if isinstance(value, str):
        value = value.strip()
    return path.format(path_segment(value))


def output_schema(**fields: FieldSpec) -> Schema:
    props = {"success": FieldSpec("boolean"), "message": FieldSpec("string")}
    props.update(fields)
    return Schema(props, required={"success", "message"}, additional_properties=True)


def failure(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


def list_ability(
    permission: PermissionRule,
    name: str,
    label: str,
    description: str,
    path: str,
    collection: str,
    noun: str,
    limit: Optional[FieldSpec] = None,
    filters: Optional[Mapping[str, FieldSpec]] = None,
) -> AbilityDescriptor:
    """
    GET listing. `limit`/`offset` (when paged) and any supplied filters go
    into the query string; the result carries the collection and its count.
    """
    props: Dict[str, FieldSpec] = {}
    if limit is not None:
        props["limit"] = limit
        props["offset"] = OFFSET
    props.update(filters or {})

    def build(v: Mapping[str, Any], config: ConfigStore) -> UpstreamRequest:
        query = {k: v[k] for k in props if k in v}
        return UpstreamRequest("GET", path, query=query or None)

    def shape(data: Any, v: Mapping[str, Any]) -> Dict[str, Any]:
        data = data if isinstance(data, dict) else {}
        items = data.get(collection) or []
        count = data.get("count")
        return {
            "success": True,
            collection: items,
            "count": count if isinstance(count, int) else len(items),
            "message": f"Retrieved {len(items)} {noun}.",
        }

    return AbilityDescriptor(
        name=name,
        label=label,
        description=description,
        input_schema=Schema(props),
        output_schema=output_schema(**{collection: FieldSpec("array"), "count": FieldSpec("integer")}),
        permission=permission,
        build_request=build,
        shape_result=shape,
        annotations=READ_ONLY,
    )


def get_ability(
    permission: PermissionRule,
    name: str,
    label: str,
    description: str,
    path: str,
    result_key: str,
    message: str,
    key: Optional[Tuple[str, FieldSpec]] = None,
    missing_message: str = "",
) -> AbilityDescriptor:
    """GET a single resource; `key` names the field encoded into `path` ("{}" placeholder)."""
    props = {key[0]: key[1]} if key else {}

    def build(v: Mapping[str, Any], config: ConfigStore):
        if not key:
            return UpstreamRequest("GET", path)
        if blank_key(v, key[0]):
            return failure(missing_message or f"{key[0]} is required.")
        return UpstreamRequest("GET", keyed_path(path, v, key[0]))

    def shape(data: Any, v: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "success": True,
            result_key: data if isinstance(data, dict) else {},
            "message": message,
        }

    return AbilityDescriptor(
        name=name,
        label=label,
        description=description,
        input_schema=Schema(props, required=set(props)),
        output_schema=output_schema(**{result_key: FieldSpec("object")}),
        permission=permission,
        build_request=build,
        shape_result=shape,
        annotations=READ_ONLY,
    )


def delete_ability(
    permission: PermissionRule,
    name: str,
    label: str,
    description: str,
    path: str,
    key: Tuple[str, FieldSpec],
    message: str,
    missing_message: str = "",
) -> AbilityDescriptor:
    """
    DELETE by id. Marked idempotent: repeating it leaves the same final state,
    though the API answers the repeat with a not-found error.
    """
    field_name, spec = key

    def build(v: Mapping[str, Any], config: ConfigStore):
        if blank_key(v, field_name):
            return failure(missing_message or f"{field_name} is required.")
        return UpstreamRequest("DELETE", keyed_path(path, v, field_name))

    return AbilityDescriptor(
        name=name,
        label=label,
        description=description,
        input_schema=Schema({field_name: spec}, required={field_name}),
        output_schema=output_schema(),
        permission=permission,
        build_request=build,
        shape_result=lambda data, v: {"success": True, "message": message},
        annotations=DELETE,
    )


def action_ability(
    permission: PermissionRule,
    name: str,
    label: str,
    description: str,
    input_schema: Schema,
    build_request: Callable[[Mapping[str, Any], ConfigStore], Any],
    shape_result: Callable[[Any, Mapping[str, Any]], Dict[str, Any]],
    annotations: Annotations,
    **output_fields: FieldSpec,
) -> AbilityDescriptor:
    return AbilityDescriptor(
        name=name,
        label=label,
        description=description,
        input_schema=input_schema,
        output_schema=output_schema(**output_fields),
        permission=permission,
        build_request=build_request,
        shape_result=shape_result,
        annotations=annotations,
    )


def created_id(data: Any) -> Dict[str, Any]:
    """`{"id": n}` when the API returned an integer id, else nothing."""
    if isinstance(data, dict) and isinstance(data.get("id"), int) and not isinstance(data.get("id"), bool):
        return {"id": data["id"]}
    return {}
