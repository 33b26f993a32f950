"""Persistence adapters for the finance store.

Both adapters expose the same two calls: ``load(key)`` returns the saved
record or ``None`` when nothing was saved yet, ``save(key, record)`` replaces
it. The store never needs to know which one it was given.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


class JSONStorage:
    """Simple file-based JSON storage with crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not isinstance(payload, dict):
            raise PersistenceError(f"Expected object payload in {path}")
        logger.debug("Loaded %s from %s", key, path)
        return payload

    def save(self, key: str, record: Dict[str, Any]) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(record, handle, indent=2, ensure_ascii=False)
                handle.flush()
            # Path.replace is an atomic rename on POSIX.
            temp_path.replace(path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Unable to write to {path}") from exc
        logger.debug("Saved %s to %s", key, path)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return self._base_path / f"{key}.json"

    @property
    def base_path(self) -> Path:
        return self._base_path


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._records.get(key)
        return copy.deepcopy(record) if record is not None else None

    def save(self, key: str, record: Dict[str, Any]) -> None:
        # Round-trip through JSON so the stored shape matches what JSONStorage writes.
        self._records[key] = json.loads(json.dumps(record))

    def __contains__(self, key: object) -> bool:
        return key in self._records
