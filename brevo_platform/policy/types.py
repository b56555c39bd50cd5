from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping


@dataclass(frozen=True)
class PermissionRule:
    # capability the caller must hold, e.g. "manage_options"
    capability: str


ADMIN_RULE = PermissionRule(capability="manage_options")


@dataclass(frozen=True)
class Caller:
    user_id: str
    capabilities: FrozenSet[str] = frozenset()

    @classmethod
    def from_context(cls, context: Any) -> "Caller":
        """
        Build the caller from an invocation context. Anything malformed yields
        a caller with no capabilities rather than an error.
        """
        if not isinstance(context, Mapping):
            context = {}
        caps = context.get("capabilities")
        if isinstance(caps, str):
            caps = (caps,)
        elif not isinstance(caps, (list, tuple, set, frozenset)):
            caps = ()
        return cls(
            user_id=str(context.get("user_id", "unknown")),
            capabilities=frozenset(c for c in caps if isinstance(c, str)),
        )
