from .registry import AbilityRegistry
from .types import AbilityDescriptor, Annotations

__all__ = ["AbilityDescriptor", "AbilityRegistry", "Annotations"]
