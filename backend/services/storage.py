"""Durable key-value records for client-session state (local-storage equivalent)."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any, Protocol

from services.errors import PersistenceError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]+")


class RecordStore(Protocol):
    def persist_record(self, key: str, value: Any) -> None: ...

    def read_record(self, key: str) -> Any | None: ...


class MemoryRecordStore:
    """In-memory store; values are round-tripped through JSON like the file store."""

    def __init__(self) -> None:
        self._records: dict[str, str] = {}

    def persist_record(self, key: str, value: Any) -> None:
        try:
            self._records[key] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"cannot serialise record {key!r}: {exc}") from exc

    def read_record(self, key: str) -> Any | None:
        raw = self._records.get(key)
        return json.loads(raw) if raw is not None else None

    def clear(self) -> None:
        self._records.clear()


class JsonFileRecordStore:
    """
    One JSON file per key under ``directory``.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace(), so a reader sees either the old or the new record.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)

    def _path(self, key: str) -> Path:
        return self._dir / f"{_SAFE_KEY.sub('_', key)}.json"

    def persist_record(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self._path(key))
            except BaseException:
                with suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"cannot persist record {key!r}: {exc}") from exc

    def read_record(self, key: str) -> Any | None:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"cannot read record {key!r}: {exc}") from exc
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise PersistenceError(f"corrupt record {key!r}: {exc}") from exc


def read_or_none(store: RecordStore, key: str) -> Any | None:
    try:
        return store.read_record(key)
    except PersistenceError as exc:
        logger.warning("[storage] Read failed for %s; starting empty: %s", key, exc)
        return None


def persist_and_verify(store: RecordStore, key: str, value: Any) -> bool:
    """
    Write a whole record and read it back.

    Returns False (after logging) when the write fails or the read-back does
    not match; the caller keeps operating on its in-memory copy.
    """
    try:
        store.persist_record(key, value)
        stored = store.read_record(key)
    except PersistenceError as exc:
        logger.warning("[storage] Persist failed for %s; continuing in memory: %s", key, exc)
        return False
    if stored != value:
        logger.warning("[storage] Read-back mismatch for %s; continuing in memory", key)
        return False
    return True
