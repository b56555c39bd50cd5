from __future__ import annotations

from typing import Dict, Iterator

from brevo_platform.errors import RegistryError

from .types import AbilityDescriptor


class AbilityRegistry:
    """
    Holds ability descriptors by name. Filled once at startup, read-only after.
    """
    def __init__(self):
        self._abilities: Dict[str, AbilityDescriptor] = {}

    def register(self, name: str, descriptor: AbilityDescriptor) -> None:
        if name != descriptor.name:
            raise RegistryError(f"Registration name '{name}' does not match descriptor '{descriptor.name}'")
        if name in self._abilities:
            raise RegistryError(f"Duplicate ability name '{name}'")
        self._abilities[name] = descriptor

    def get(self, name: str) -> AbilityDescriptor:
        if name not in self._abilities:
            raise RegistryError(f"Unknown ability '{name}'")
        return self._abilities[name]

    def list(self) -> Dict[str, AbilityDescriptor]:
        return dict(self._abilities)

    def __contains__(self, name: object) -> bool:
        return name in self._abilities

    def __len__(self) -> int:
        return len(self._abilities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._abilities)
