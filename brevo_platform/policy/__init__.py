from .policy import PermissionGate
from .types import ADMIN_RULE, Caller, PermissionRule

__all__ = ["ADMIN_RULE", "Caller", "PermissionGate", "PermissionRule"]
