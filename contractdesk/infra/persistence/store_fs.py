"""JSON file key-value store: one file per collection key."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List

from contractdesk.infra.config.settings import settings
from contractdesk.infra.persistence.kv_store import KeyValueStore, Record
from contractdesk.infra.storage.fs import FileLock, collection_path, read_json, write_json
from contractdesk.shared.errors import StorageError
from contractdesk.shared.logging import get_logger

logger = get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """Stores ``<key>.json`` files under the data directory."""

    name = "fs"

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or settings.data_root
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return collection_path(key, self.root)

    def load(self, key: str) -> List[Record]:
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            with FileLock(path):
                data = read_json(path)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Corrupted collection file %s: %s", path, exc)
            raise StorageError(f"Collection '{key}' is not valid JSON", code="malformed_collection") from exc
        if not isinstance(data, list):
            raise StorageError(f"Collection '{key}' is not a list", code="malformed_collection")
        return data

    def save(self, key: str, records: List[Record]) -> None:
        write_json(self.path_for(key), list(records))
