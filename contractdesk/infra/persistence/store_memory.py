"""In-memory key-value store implementation."""
from __future__ import annotations

import json
import threading
from typing import Dict, List

from contractdesk.infra.persistence.kv_store import KeyValueStore, Record
from contractdesk.shared.errors import StorageError


class MemoryKeyValueStore(KeyValueStore):
    """Keeps each collection as a JSON string, like browser localStorage."""

    name = "memory"

    def __init__(self) -> None:
        self._payloads: Dict[str, str] = {}
        self._lock = threading.RLock()

    def load(self, key: str) -> List[Record]:
        with self._lock:
            payload = self._payloads.get(key)
        if payload is None:
            return []
        data = json.loads(payload)
        if not isinstance(data, list):
            raise StorageError(f"Collection '{key}' is not a list", code="malformed_collection")
        return data

    def save(self, key: str, records: List[Record]) -> None:
        payload = json.dumps(list(records), ensure_ascii=False)
        with self._lock:
            self._payloads[key] = payload
