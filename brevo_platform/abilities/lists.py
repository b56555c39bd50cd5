from __future__ import annotations

from typing import Any, List, Mapping

from brevo_platform.client import UpstreamRequest
from brevo_platform.config import ConfigStore
from brevo_platform.policy import PermissionRule
from brevo_platform.registry import AbilityDescriptor
from brevo_platform.schema import FieldSpec, Schema

from .builders import (
    CREATE,
    UPDATE,
    action_ability,
    clean_emails,
    created_id,
    delete_ability,
    failure,
    get_ability,
    id_field,
    list_ability,
    page_limit,
)

LIST_ID = id_field("ID of the list.")


def _membership_schema(verb: str) -> Schema:
    return Schema(
        {
            "listId": LIST_ID,
            "emails": FieldSpec(
                "array",
                items=FieldSpec("string"),
                description=f"Array of email addresses to {verb}.",
            ),
        },
        required={"listId", "emails"},
    )


def _membership(action: str, done: str):
    def build(v: Mapping[str, Any], config: ConfigStore):
        if not v["emails"]:
            return failure("listId and emails are required.")
        emails = clean_emails(v["emails"])
        if not emails:
            return failure("No valid email addresses provided.")
        return UpstreamRequest(
            "POST",
            f"contacts/lists/{v['listId']}/contacts/{action}",
            body={"emails": emails},
        )

    def shape(data: Any, v: Mapping[str, Any]):
        return {"success": True, "message": done.format(len(clean_emails(v["emails"])))}

    return build, shape


def _build_create_list(v: Mapping[str, Any], config: ConfigStore):
    name = v["name"].strip()
    if not name:
        return failure("Name and folderId are required.")
    return UpstreamRequest("POST", "contacts/lists", body={"name": name, "folderId": v["folderId"]})


def abilities(permission: PermissionRule) -> List[AbilityDescriptor]:
    add_build, add_shape = _membership("add", "Added {} contact(s) to list.")
    remove_build, remove_shape = _membership("remove", "Removed {} contact(s) from list.")

    return [
        list_ability(
            permission,
            "brevo/list-lists",
            label="List Brevo Lists",
            description="Get all contact lists from Brevo.",
            path="contacts/lists",
            collection="lists",
            noun="lists",
            limit=page_limit(50, noun="lists"),
        ),
        get_ability(
            permission,
            "brevo/get-list",
            label="Get Brevo List",
            description="Get the details of a contact list.",
            path="contacts/lists/{}",
            key=("listId", LIST_ID),
            result_key="list",
            message="List retrieved successfully.",
        ),
        action_ability(
            permission,
            "brevo/create-list",
            label="Create Brevo List",
            description="Create a new contact list in Brevo.",
            input_schema=Schema(
                {
                    "name": FieldSpec("string", description="Name of the list."),
                    "folderId": id_field("Folder ID to create the list in."),
                },
                required={"name", "folderId"},
            ),
            build_request=_build_create_list,
            shape_result=lambda data, v: {
                "success": True,
                **created_id(data),
                "message": "List created successfully.",
            },
            annotations=CREATE,
            id=FieldSpec("integer"),
        ),
        delete_ability(
            permission,
            "brevo/delete-list",
            label="Delete Brevo List",
            description="Delete a contact list. Contacts in it are kept.",
            path="contacts/lists/{}",
            key=("listId", LIST_ID),
            message="List deleted successfully.",
        ),
        action_ability(
            permission,
            "brevo/add-to-list",
            label="Add Contacts to List",
            description="Add contacts to a Brevo list.",
            input_schema=_membership_schema("add"),
            build_request=add_build,
            shape_result=add_shape,
            annotations=UPDATE,
        ),
        action_ability(
            permission,
            "brevo/remove-from-list",
            label="Remove Contacts from List",
            description="Remove contacts from a Brevo list.",
            input_schema=_membership_schema("remove"),
            build_request=remove_build,
            shape_result=remove_shape,
            annotations=UPDATE,
        ),
        list_ability(
            permission,
            "brevo/list-folders",
            label="List Brevo Folders",
            description="Get the folders that contact lists are organised in.",
            path="contacts/folders",
            collection="folders",
            noun="folders",
            limit=page_limit(10, maximum=50, noun="folders"),
        ),
    ]
