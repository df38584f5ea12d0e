"""Generic registry for storing and retrieving components by name."""

from __future__ import annotations
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """
    A generic registry for storing and retrieving components by name.
    Names are case-insensitive.
    """

    def __init__(self, name: str = "Registry") -> None:
        self.name = name
        self._registry: Dict[str, T] = {}

    @staticmethod
    def _key(name: str) -> str:
        return (name or "").strip().lower()

    def register(self, name: str, component: T) -> T:
        """
        Register a component with a given name.
        Overwrites existing component if name already exists.
        """
        self._registry[self._key(name)] = component
        return component

    def get(self, name: str) -> Optional[T]:
        """
        Get a component by name. Returns None if not found.
        """
        return self._registry.get(self._key(name))

    def names(self) -> List[str]:
        """Registered names, sorted."""
        return sorted(self._registry)

