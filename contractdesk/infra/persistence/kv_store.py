"""Key-value persistence contract for the two record collections."""
from __future__ import annotations

from typing import Any, Dict, List

Record = Dict[str, Any]


class KeyValueStore:
    """Abstract base class for collection persistence.

    Each key holds one whole collection; ``save`` replaces it entirely.
    """

    name: str = "abstract"

    def load(self, key: str) -> List[Record]:
        """Return the records stored under ``key`` or an empty list."""
        raise NotImplementedError

    def save(self, key: str, records: List[Record]) -> None:
        """Replace the collection stored under ``key``."""
        raise NotImplementedError
