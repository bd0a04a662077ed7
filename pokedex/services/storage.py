"""Durable key/value storage used to persist favorites between sessions.

The medium mirrors browser ``localStorage``: string keys mapping to string
values, read on start-up and rewritten wholesale on every change.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from pokedex.exceptions import MalformedStorageError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None:
        """Return the stored string for ``key`` or ``None`` when absent."""

    def set_item(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``, replacing any previous value."""


class MemoryStorage(KeyValueStorage):
    """Process-local storage used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStorage(KeyValueStorage):
    """Store every key inside a single JSON object on disk.

    Writes land in a sibling temporary file that replaces the target with
    :func:`os.replace`, so readers never observe a half-written document.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedStorageError(
                f"Storage file {self._path} is not valid UTF-8",
                key="*",
                detail=str(exc),
            ) from exc
        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedStorageError(
                f"Storage file {self._path} is corrupted",
                key="*",
                detail=str(exc),
            ) from exc

        if not isinstance(data, dict):
            raise MalformedStorageError(
                f"Storage file {self._path} must contain a JSON object",
                key="*",
                detail=type(data).__name__,
            )
        items = {str(key): value for key, value in data.items() if isinstance(value, str)}
        dropped = sorted(str(key) for key in data if str(key) not in items)
        if dropped:
            logger.debug("Ignoring non-string values in %s for keys %s", self._path, dropped)
        return items

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except MalformedStorageError as exc:
            logger.warning("Discarding unreadable storage file %s: %s", self._path, exc.detail)
            items = {}
        items[key] = value

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Persisted key %s to %s", key, self._path)
