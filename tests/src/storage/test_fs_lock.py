"""Tests for file locking and JSON helpers."""
import json
import os
import threading

import pytest

from contractdesk.infra.storage.fs import (
    FileLock,
    collection_path,
    read_json,
    write_json,
)


def test_filelock_reentrant_same_thread(tmp_path):
    """Reentrant locking in the same thread does not deadlock."""
    target = tmp_path / "file.json"
    lock = FileLock(target, timeout=1.0)
    with lock:
        with lock:
            write_json(target, [{"a": 1}])
        assert lock.lock_path.exists()
    assert not lock.lock_path.exists()
    assert read_json(target) == [{"a": 1}]


def test_filelock_blocks_other_thread(tmp_path):
    """A held lock makes another thread time out."""
    target = tmp_path / "file.json"
    acquired = []

    def worker():
        try:
            with FileLock(target, timeout=0.3):
                acquired.append("other")
        except TimeoutError:
            acquired.append("timeout")

    with FileLock(target, timeout=1.0):
        t = threading.Thread(target=worker)
        t.start()
        t.join()
    assert acquired == ["timeout"]


def test_filelock_removes_stale_lock_of_dead_process(tmp_path, monkeypatch):
    target = tmp_path / "file.json"
    lock_path = target.with_suffix(".json.lock")
    lock_path.write_text("999999", encoding="utf-8")

    def fake_kill(pid, sig):  # noqa: ARG001
        raise OSError("no such process")

    monkeypatch.setattr(os, "kill", fake_kill)
    with FileLock(target, timeout=1.0):
        assert lock_path.read_text(encoding="utf-8") == str(os.getpid())


def test_write_json_creates_directories_and_leaves_no_tmp(tmp_path):
    nested = tmp_path / "a" / "b" / "c.json"
    write_json(nested, {"k": "v"})
    assert json.loads(nested.read_text(encoding="utf-8"))["k"] == "v"
    assert not nested.with_suffix(".tmp").exists()
    assert not nested.with_suffix(".json.lock").exists()


def test_collection_path_sanitizes_key(tmp_path):
    assert collection_path("contracts", tmp_path) == tmp_path / "contracts.json"
    assert collection_path("../evil key", tmp_path).parent == tmp_path
    with pytest.raises(ValueError):
        collection_path("  ", tmp_path)
