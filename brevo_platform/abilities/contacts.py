from __future__ import annotations

from typing import Any, Dict, List, Mapping

from brevo_platform.client import UpstreamRequest
from brevo_platform.config import ConfigStore
from brevo_platform.policy import PermissionRule
from brevo_platform.registry import AbilityDescriptor
from brevo_platform.schema import FieldSpec, Schema

from .builders import (
    CREATE,
    UPDATE,
    action_ability,
    created_id,
    delete_ability,
    failure,
    get_ability,
    list_ability,
    page_limit,
    path_segment,
    sparse,
)

IDENTIFIER = FieldSpec("string", description="Contact email address or ID.")
MISSING_IDENTIFIER = "Identifier (email or ID) is required."
LIST_IDS = FieldSpec("array", items=FieldSpec("integer"), description="List IDs to add the contact to.")


def _build_create(v: Mapping[str, Any], config: ConfigStore):
    email = v["email"].strip()
    if not email:
        return failure("Email is required.")
    body: Dict[str, Any] = {"email": email}
    body.update(sparse(v, ("attributes", "listIds", "emailBlacklisted", "updateEnabled")))
    return UpstreamRequest("POST", "contacts", body=body)


def _build_update(v: Mapping[str, Any], config: ConfigStore):
    if not v["identifier"].strip():
        return failure(MISSING_IDENTIFIER)
    body = sparse(v, ("attributes", "listIds", "unlinkListIds", "emailBlacklisted"))
    if not body:
        return failure("No update data provided.")
    return UpstreamRequest("PUT", f"contacts/{path_segment(v['identifier'].strip())}", body=body)


def abilities(permission: PermissionRule) -> List[AbilityDescriptor]:
    return [
        list_ability(
            permission,
            "brevo/list-contacts",
            label="List Brevo Contacts",
            description="Get all contacts from Brevo with pagination.",
            path="contacts",
            collection="contacts",
            noun="contacts",
            limit=page_limit(50, maximum=1000, noun="contacts"),
            filters={
                "sort": FieldSpec(
                    "string",
                    enum=("asc", "desc"),
                    description="Sort by record creation date.",
                ),
            },
        ),
        get_ability(
            permission,
            "brevo/get-contact",
            label="Get Brevo Contact",
            description="Get a single contact by email or ID.",
            path="contacts/{}",
            key=("identifier", IDENTIFIER),
            missing_message=MISSING_IDENTIFIER,
            result_key="contact",
            message="Contact retrieved successfully.",
        ),
        action_ability(
            permission,
            "brevo/create-contact",
            label="Create Brevo Contact",
            description="Create a new contact in Brevo.",
            input_schema=Schema(
                {
                    "email": FieldSpec("string", description="Email address of the contact."),
                    "attributes": FieldSpec(
                        "object",
                        description="Contact attributes (FIRSTNAME, LASTNAME, SMS, etc.).",
                    ),
                    "listIds": LIST_IDS,
                    "emailBlacklisted": FieldSpec(
                        "boolean",
                        description="Blacklist the contact for emails.",
                    ),
                    "updateEnabled": FieldSpec(
                        "boolean",
                        default=False,
                        description="Update contact if already exists.",
                    ),
                },
                required={"email"},
            ),
            build_request=_build_create,
            shape_result=lambda data, v: {
                "success": True,
                **created_id(data),
                "message": "Contact created successfully.",
            },
            annotations=CREATE,
            id=FieldSpec("integer"),
        ),
        action_ability(
            permission,
            "brevo/update-contact",
            label="Update Brevo Contact",
            description="Update an existing contact in Brevo. Omitted fields are left unchanged.",
            input_schema=Schema(
                {
                    "identifier": IDENTIFIER,
                    "attributes": FieldSpec("object", description="Contact attributes to update."),
                    "listIds": FieldSpec(
                        "array",
                        items=FieldSpec("integer"),
                        description="List IDs to add the contact to.",
                    ),
                    "unlinkListIds": FieldSpec(
                        "array",
                        items=FieldSpec("integer"),
                        description="List IDs to remove contact from.",
                    ),
                    "emailBlacklisted": FieldSpec(
                        "boolean",
                        description="Blacklist or un-blacklist the contact for emails.",
                    ),
                },
                required={"identifier"},
            ),
            build_request=_build_update,
            shape_result=lambda data, v: {"success": True, "message": "Contact updated successfully."},
            annotations=UPDATE,
        ),
        delete_ability(
            permission,
            "brevo/delete-contact",
            label="Delete Brevo Contact",
            description="Delete a contact from Brevo.",
            path="contacts/{}",
            key=("identifier", IDENTIFIER),
            missing_message=MISSING_IDENTIFIER,
            message="Contact deleted successfully.",
        ),
        list_ability(
            permission,
            "brevo/list-attributes",
            label="List Contact Attributes",
            description="Get all contact attributes defined in Brevo.",
            path="contacts/attributes",
            collection="attributes",
            noun="attributes",
        ),
    ]
