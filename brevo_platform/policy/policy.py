from __future__ import annotations

from brevo_platform.policy.types import Caller, PermissionRule


class PermissionGate:
    """
    Decides whether a caller may run an ability.
    Evaluated after input validation and before any upstream request.
    """

    def authorize(self, rule: PermissionRule, caller: Caller) -> bool:
        return rule.capability in caller.capabilities
