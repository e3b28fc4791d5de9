"""
Key-value stores for persisted sessions.

Keys are usernames and values are cookie mappings. Anything with
get/set/save can stand in for the stores below.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def save(self) -> None: ...


class MemoryCacheStore:
    """Dict-backed store, mostly for tests and short-lived scripts."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def save(self) -> None:
        pass


class FileCacheStore:
    """
    One JSON file per key under `directory`.

    `set` stages a value and `save` writes every staged value to disk. Reads
    see staged values first.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self._pending: dict[str, Any] = {}

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode()).hexdigest()[:16]
        return self.directory / f"{digest}.json"

    def get(self, key: str) -> Optional[Any]:
        if key in self._pending:
            return self._pending[key]

        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable session file {path}: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        self._pending[key] = value

    def save(self) -> None:
        if not self._pending:
            return
        self.directory.mkdir(parents=True, exist_ok=True)
        for key, value in self._pending.items():
            path = self._path(key)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(json.dumps(value, indent=2), encoding="utf-8")
            tmp.replace(path)
            logger.debug(f"Saved session for {key} to {path}")
        self._pending.clear()
