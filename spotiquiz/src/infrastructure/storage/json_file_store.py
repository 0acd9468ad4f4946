# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Persisted Client State (Infrastructure Layer).

JSON-file implementation of the key-value store protocol, plus an in-memory
variant for tests and throwaway sessions.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from spotiquiz.src.domain.protocols.key_value_store_protocol import KeyValueStoreProtocol
from spotiquiz.src.monitoring.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class MemoryStore(KeyValueStoreProtocol):
    """Non-persistent store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        """Copy of all values (for testing)."""
        with self._lock:
            return dict(self._values)


class JsonFileStore(KeyValueStoreProtocol):
    """
    Store backed by a single JSON object on disk.

    The file is read once on first access and rewritten atomically after
    every change. A missing file is an empty store; an unreadable one is an
    error rather than silently discarded state.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: JSON file location; parent directories are created on write
        """
        self._path = Path(path)
        self._values: Optional[Dict[str, str]] = None
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values

        if not self._path.exists():
            logger.debug(f"State file {self._path} not found, starting empty")
            self._values = {}
            return self._values

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read state file {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise StorageError(f"State file {self._path} must hold a JSON object")

        self._values = {str(k): str(v) for k, v in raw.items()}
        logger.debug(f"Loaded {len(self._values)} keys from {self._path}")
        return self._values

    def _flush(self) -> None:
        tmp_name: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self._path.parent), suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(self._values, tmp, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write state file {self._path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._load()
            previous = values.get(key)
            if previous == value:
                return
            values[key] = value
            try:
                self._flush()
            except StorageError:
                # Memory must keep matching the file
                if previous is None:
                    del values[key]
                else:
                    values[key] = previous
                raise

    def delete(self, key: str) -> None:
        with self._lock:
            values = self._load()
            if key not in values:
                return
            previous = values.pop(key)
            try:
                self._flush()
            except StorageError:
                values[key] = previous
                raise
