from __future__ import annotations

from typing import List

from brevo_platform.policy import PermissionRule
from brevo_platform.registry import AbilityDescriptor

from .builders import get_ability


def abilities(permission: PermissionRule) -> List[AbilityDescriptor]:
    return [
        get_ability(
            permission,
            "brevo/get-account",
            label="Get Brevo Account",
            description="Get account details, plan and credits.",
            path="account",
            result_key="account",
            message="Account details retrieved.",
        ),
    ]
