"""Pytest configuration and fixtures for test suite."""
# pylint: disable=redefined-outer-name,protected-access
import sys
from pathlib import Path

import pytest

# Put the project root first on sys.path so contractdesk.* imports work without installing
PROJECT_ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(PROJECT_ROOT)
if ROOT_STR in sys.path:
    sys.path.remove(ROOT_STR)
sys.path.insert(0, ROOT_STR)


@pytest.fixture
def mock_settings(tmp_path):
    """Points settings at a temporary data directory with the memory backend."""
    # pylint: disable=import-outside-toplevel
    from contractdesk.infra.config.settings import settings
    from contractdesk.infra.persistence import store

    keys_to_update = [
        "env", "is_prod", "data_root", "storage_backend",
        "blueprints_key", "contracts_key", "lock_timeout",
    ]
    original_values = {key: getattr(settings, key) for key in keys_to_update}

    settings.env = "test"
    settings.is_prod = False
    settings.data_root = tmp_path / "data"
    settings.storage_backend = "memory"
    settings.blueprints_key = "contract_blueprints"
    settings.contracts_key = "contracts"
    settings.lock_timeout = 2.0
    store._reset_for_tests()

    settings.data_root.mkdir(parents=True, exist_ok=True)

    yield settings

    for key, value in original_values.items():
        setattr(settings, key, value)
    store._reset_for_tests()


@pytest.fixture
def memory_kv():
    """Fresh in-memory key-value store."""
    from contractdesk.infra.persistence.store_memory import MemoryKeyValueStore  # pylint: disable=import-outside-toplevel
    return MemoryKeyValueStore()


@pytest.fixture
def workspace(mock_settings, memory_kv):  # noqa: ARG001
    """Workspace over an empty in-memory store."""
    from contractdesk.domain.services.workspace import Workspace  # pylint: disable=import-outside-toplevel
    return Workspace(kv_store=memory_kv)


@pytest.fixture
def nda_blueprint(workspace):
    """Blueprint with a text, a checkbox and a signature field."""
    from contractdesk.domain.blueprints.models import new_blueprint_field  # pylint: disable=import-outside-toplevel
    return workspace.create_blueprint(
        "NDA",
        [
            new_blueprint_field("Signer", "text"),
            new_blueprint_field("Agree", "checkbox"),
            new_blueprint_field("Signature", "signature"),
        ],
    )
