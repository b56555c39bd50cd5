from __future__ import annotations

from typing import Any, List, Mapping

from brevo_platform.client import UpstreamRequest
from brevo_platform.config import ConfigStore
from brevo_platform.policy import PermissionRule
from brevo_platform.registry import AbilityDescriptor
from brevo_platform.schema import FieldSpec, Schema

from .builders import (
    CREATE,
    action_ability,
    clean_emails,
    failure,
    get_ability,
    id_field,
    list_ability,
    page_limit,
)

CAMPAIGN_ID = id_field("ID of the campaign.")

STATUSES = ("suspended", "archive", "sent", "queued", "draft", "inProcess")


def _build_send_test(v: Mapping[str, Any], config: ConfigStore):
    emails = clean_emails(v["emailTo"])
    if not emails:
        return failure("No valid email addresses provided.")
    return UpstreamRequest(
        "POST",
        f"emailCampaigns/{v['campaignId']}/sendTest",
        body={"emailTo": emails},
    )


def abilities(permission: PermissionRule) -> List[AbilityDescriptor]:
    return [
        list_ability(
            permission,
            "brevo/list-campaigns",
            label="List Email Campaigns",
            description="Get all email campaigns from Brevo.",
            path="emailCampaigns",
            collection="campaigns",
            noun="campaigns",
            limit=page_limit(50, noun="campaigns"),
            filters={
                "type": FieldSpec(
                    "string",
                    enum=("classic", "trigger"),
                    default="classic",
                    description="Campaign type.",
                ),
                "status": FieldSpec("string", enum=STATUSES, description="Filter by campaign status."),
            },
        ),
        get_ability(
            permission,
            "brevo/get-campaign",
            label="Get Email Campaign",
            description="Get the details of an email campaign.",
            path="emailCampaigns/{}",
            key=("campaignId", CAMPAIGN_ID),
            result_key="campaign",
            message="Campaign retrieved successfully.",
        ),
        action_ability(
            permission,
            "brevo/send-campaign",
            label="Send Email Campaign",
            description="Send an email campaign immediately.",
            input_schema=Schema({"campaignId": CAMPAIGN_ID}, required={"campaignId"}),
            build_request=lambda v, config: UpstreamRequest(
                "POST", f"emailCampaigns/{v['campaignId']}/sendNow"
            ),
            shape_result=lambda data, v: {"success": True, "message": "Campaign sent successfully."},
            annotations=CREATE,
        ),
        action_ability(
            permission,
            "brevo/send-test-campaign",
            label="Send Test Campaign",
            description="Send a test version of a campaign to the given addresses.",
            input_schema=Schema(
                {
                    "campaignId": CAMPAIGN_ID,
                    "emailTo": FieldSpec(
                        "array",
                        items=FieldSpec("string"),
                        description="Addresses to receive the test (must be in Brevo's test list).",
                    ),
                },
                required={"campaignId", "emailTo"},
            ),
            build_request=_build_send_test,
            shape_result=lambda data, v: {
                "success": True,
                "message": f"Test campaign sent to {len(clean_emails(v['emailTo']))} recipient(s).",
            },
            annotations=CREATE,
        ),
    ]
