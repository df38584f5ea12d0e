"""Persistence backend selection with a filesystem/memory fallback."""
from __future__ import annotations

from typing import Callable, Optional

from contractdesk.infra.config.settings import settings
from contractdesk.infra.persistence.kv_store import KeyValueStore
from contractdesk.infra.persistence.store_fs import JsonFileKeyValueStore
from contractdesk.infra.persistence.store_memory import MemoryKeyValueStore
from contractdesk.shared.logging import get_logger
from contractdesk.shared.registry import Registry

logger = get_logger(__name__)

backends: Registry[Callable[[], KeyValueStore]] = Registry("storage-backends")
backends.register(MemoryKeyValueStore.name, MemoryKeyValueStore)
backends.register(JsonFileKeyValueStore.name, JsonFileKeyValueStore)


class _StoreState:
    """
    Module-level store state container.

    Holds the singleton key-value store instance.
    """

    instance: Optional[KeyValueStore] = None

    def reset(self) -> None:
        """Reset state for testing."""
        self.instance = None


_state = _StoreState()


def create_kv_store(backend: str | None = None) -> KeyValueStore:
    """Build a store for ``backend`` (defaults to the configured one).

    Unknown backends and filesystem errors fall back to memory.
    """
    name = (backend or settings.storage_backend or "fs").lower()
    factory = backends.get(name)
    if factory is None:
        logger.error(
            "Unknown storage backend %r (known: %s), fallback to memory",
            name, ", ".join(backends.names()),
        )
        return MemoryKeyValueStore()
    try:
        store = factory()
    except OSError as exc:
        logger.error("Storage backend %r failed to init, fallback to memory: %s", name, exc)
        return MemoryKeyValueStore()
    logger.info("Storage backend: %s", store.name)
    return store


def get_kv_store() -> KeyValueStore:
    """Get or create the singleton key-value store."""
    if _state.instance is None:
        _state.instance = create_kv_store()
    return _state.instance


def _reset_for_tests() -> None:
    _state.reset()
