from __future__ import annotations

from typing import Any, Dict, List, Mapping

from brevo_platform.client import UpstreamRequest
from brevo_platform.config import ConfigStore, default_sender
from brevo_platform.policy import PermissionRule
from brevo_platform.registry import AbilityDescriptor
from brevo_platform.schema import FieldSpec, Schema

from .builders import (
    CREATE,
    action_ability,
    failure,
    get_ability,
    id_field,
    list_ability,
    page_limit,
    sparse,
)


def _party(description: str) -> FieldSpec:
    return FieldSpec(
        "object",
        properties={"email": FieldSpec("string"), "name": FieldSpec("string")},
        description=description,
    )


SEND_EMAIL_INPUT = Schema(
    {
        "to": FieldSpec(
            "array",
            items=_party("Recipient."),
            description="Array of recipients with email and optional name.",
        ),
        "subject": FieldSpec("string", description="Email subject."),
        "htmlContent": FieldSpec("string", description="HTML content of the email."),
        "textContent": FieldSpec("string", description="Plain text content of the email."),
        "sender": _party("Sender email and name (must be verified in Brevo)."),
        "replyTo": _party("Reply-to email and name."),
        "templateId": id_field("ID of a Brevo template to use."),
        "params": FieldSpec("object", description="Template variables."),
        "tags": FieldSpec("array", items=FieldSpec("string"), description="Tags for filtering events."),
    },
    required={"to", "subject"},
)


def _build_send_email(v: Mapping[str, Any], config: ConfigStore):
    subject = v["subject"].strip()
    if not v["to"] or not subject:
        return failure("to and subject are required.")

    body: Dict[str, Any] = {"to": v["to"], "subject": subject}
    body.update(sparse(v, ("htmlContent", "textContent", "templateId")))

    # explicit sender wins; otherwise the stored default, if any
    if v.get("sender"):
        body["sender"] = v["sender"]
    else:
        sender = default_sender(config)
        if sender:
            body["sender"] = sender

    body.update(sparse(v, ("replyTo", "params", "tags")))
    return UpstreamRequest("POST", "smtp/email", body=body)


def _shape_send_email(data: Any, v: Mapping[str, Any]) -> Dict[str, Any]:
    message_id = data.get("messageId") if isinstance(data, dict) else None
    return {
        "success": True,
        "messageId": str(message_id or ""),
        "message": "Email sent successfully.",
    }


def abilities(permission: PermissionRule) -> List[AbilityDescriptor]:
    return [
        list_ability(
            permission,
            "brevo/list-senders",
            label="List Brevo Senders",
            description="Get the sender identities configured in Brevo.",
            path="senders",
            collection="senders",
            noun="senders",
        ),
        list_ability(
            permission,
            "brevo/list-templates",
            label="List Email Templates",
            description="Get transactional email templates from Brevo.",
            path="smtp/templates",
            collection="templates",
            noun="templates",
            limit=page_limit(50, maximum=1000, noun="templates"),
            filters={
                "templateStatus": FieldSpec(
                    "boolean",
                    description="Only active (true) or inactive (false) templates.",
                ),
            },
        ),
        get_ability(
            permission,
            "brevo/get-template",
            label="Get Email Template",
            description="Get a transactional email template by ID.",
            path="smtp/templates/{}",
            key=("templateId", id_field("ID of the template.")),
            result_key="template",
            message="Template retrieved successfully.",
        ),
        action_ability(
            permission,
            "brevo/send-email",
            label="Send Transactional Email",
            description="Send a transactional email via Brevo.",
            input_schema=SEND_EMAIL_INPUT,
            build_request=_build_send_email,
            shape_result=_shape_send_email,
            annotations=CREATE,
            messageId=FieldSpec("string"),
        ),
    ]
