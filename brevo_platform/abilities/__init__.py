"""The Brevo ability catalog."""

from __future__ import annotations

from typing import List, Optional

from brevo_platform.policy import ADMIN_RULE, PermissionRule
from brevo_platform.registry import AbilityDescriptor, AbilityRegistry

from . import account, campaigns, contacts, email, lists

_MODULES = (contacts, lists, email, campaigns, account)


def build_abilities(permission: PermissionRule = ADMIN_RULE) -> List[AbilityDescriptor]:
    """Build every descriptor, each sharing the given permission rule."""
    out: List[AbilityDescriptor] = []
    for module in _MODULES:
        out.extend(module.abilities(permission))
    return out


def register_abilities(
    registry: AbilityRegistry,
    descriptors: Optional[List[AbilityDescriptor]] = None,
) -> AbilityRegistry:
    for descriptor in descriptors if descriptors is not None else build_abilities():
        registry.register(descriptor.name, descriptor)
    return registry


__all__ = ["build_abilities", "register_abilities"]
