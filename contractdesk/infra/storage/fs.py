"""File system helpers for the JSON collection files."""
from __future__ import annotations

import json
import os
import random
import re
import threading
import time
from pathlib import Path
from typing import Any

from contractdesk.infra.config.settings import settings

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


def collection_path(key: str, root: Path | None = None) -> Path:
    """Path of the JSON file that stores the collection under ``key``."""
    if not key or not key.strip():
        raise ValueError("Collection key must not be empty")
    safe = _SAFE_KEY.sub("_", key.strip())
    return (root or settings.data_root) / f"{safe}.json"


class FileLock:
    """
    Inter-process lock based on the existence of a ``.lock`` file.
    Re-entrant for the thread that holds it.
    """

    # lock_path -> (owner_thread_ident, recursion_count)
    _held: dict = {}
    _held_mutex = threading.RLock()

    def __init__(self, path: Path, timeout: float | None = None):
        self.path = path
        self.lock_path = path.with_suffix(path.suffix + ".lock")
        self.timeout = timeout if timeout is not None else settings.lock_timeout

    def _reenter(self, thread_id: int) -> bool:
        with self._held_mutex:
            owner_count = self._held.get(self.lock_path)
            if owner_count and owner_count[0] == thread_id:
                self._held[self.lock_path] = (thread_id, owner_count[1] + 1)
                return True
        return False

    def _held_in_process(self) -> bool:
        with self._held_mutex:
            return self.lock_path in self._held

    def _create(self, thread_id: int) -> bool:
        try:
            with open(self.lock_path, "x", encoding="utf-8") as f:
                f.write(str(os.getpid()))
                f.flush()
                os.fsync(f.fileno())
        except FileExistsError:
            return False
        with self._held_mutex:
            self._held[self.lock_path] = (thread_id, 1)
        return True

    def _lock_owner_pid(self) -> int | None:
        try:
            raw = self.lock_path.read_text(encoding="utf-8").strip()
            return int(raw) if raw else None
        except (ValueError, OSError):
            return None

    def _is_stale(self) -> bool:
        pid = self._lock_owner_pid()
        if pid == os.getpid():
            # Left behind by this process and not tracked as held
            return True
        if pid:
            try:
                os.kill(pid, 0)
                return False
            except OSError:
                return True
        try:
            return time.time() - self.lock_path.stat().st_mtime > 30.0
        except OSError:
            return False

    def _remove_if_stale(self) -> None:
        if self._is_stale():
            try:
                os.remove(self.lock_path)
            except OSError:
                pass

    def acquire(self) -> None:
        """Acquire the lock or raise TimeoutError."""
        thread_id = threading.get_ident()
        if self._reenter(thread_id):
            return

        deadline = time.time() + self.timeout
        while True:
            if not self._held_in_process():
                if self._create(thread_id):
                    return
                self._remove_if_stale()
            if time.time() > deadline:
                raise TimeoutError(
                    f"Could not acquire lock for {self.path} after {self.timeout}s"
                )
            time.sleep(random.uniform(0.05, 0.1))

    def release(self) -> None:
        """Release the lock; the file goes away on the outermost release."""
        thread_id = threading.get_ident()
        with self._held_mutex:
            owner_count = self._held.get(self.lock_path)
            if not owner_count or owner_count[0] != thread_id:
                return
            if owner_count[1] > 1:
                self._held[self.lock_path] = (thread_id, owner_count[1] - 1)
                return
            del self._held[self.lock_path]

        # Retry a few times for transient Windows file locking
        for _ in range(3):
            try:
                os.remove(self.lock_path)
                break
            except FileNotFoundError:
                break
            except OSError:
                time.sleep(0.01)

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


def read_json(path: Path) -> Any:
    """Read and parse JSON file."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any) -> None:
    """Write JSON to ``path`` atomically under its file lock."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with FileLock(path):
        _write_atomic(path, data)


def _write_atomic(path: Path, data: Any) -> None:
    tmp_path = path.with_suffix(".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass
