"""
storage/records.py

Record Store boundary + the local demo implementation.

The app talks to every backend through three calls:

    select(table, filters=None, order=None) -> list[dict]
    insert(table, record) -> dict
    update(table, record, match) -> list[dict]

``filters`` / ``match`` are column-equality maps; ``order`` is
``(column, descending)``.

JsonRecordStore keeps every table as a list of rows in one JSON document:
- ./data/mysurgeon_db.json by default, or memory only when ``path=None``
- atomic writes (tmp file + replace)
- optional Fernet encryption of the whole document (storage.crypto)

NOT for real PHI usage.
"""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol
from uuid import uuid4

from storage.crypto import decrypt_json, encrypt_json

logger = logging.getLogger(__name__)

Order = tuple[str, bool]


class RecordStoreError(RuntimeError):
    """A read or write was rejected by the store or never reached it."""


class RecordStore(Protocol):
    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
    ) -> list[dict]: ...

    def insert(self, table: str, record: Mapping[str, Any]) -> dict: ...

    def update(self, table: str, record: Mapping[str, Any], match: Mapping[str, Any]) -> list[dict]: ...


def _now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)


def _matches(row: Mapping[str, Any], filters: Mapping[str, Any] | None) -> bool:
    if not filters:
        return True
    return all(row.get(k) == v for k, v in filters.items())


def _sort_key(column: str):
    # Rows missing the column sort first ascending / last descending.
    def key(row: Mapping[str, Any]):
        value = row.get(column)
        return (value is not None, "" if value is None else value)

    return key


class JsonRecordStore:
    def __init__(self, path: Optional[Path] = None, encrypted: bool = False):
        self.path = path
        self.encrypted = encrypted
        self._memory: dict[str, list[dict]] = {}
        if self.path is not None and not self.path.exists():
            self.save({})

    def load(self) -> dict[str, list[dict]]:
        if self.path is None:
            return deepcopy(self._memory)
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RecordStoreError(f"Cannot read {self.path}: {exc}") from exc
        if self.encrypted:
            return decrypt_json(text)
        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("Record store %s is not valid JSON: %s", self.path, exc)
            raise RecordStoreError(f"Corrupt record store {self.path}: {exc}") from exc

    def save(self, db: dict[str, list[dict]]) -> None:
        if self.path is None:
            self._memory = deepcopy(db)
            return
        if self.encrypted:
            text = encrypt_json(db)
        else:
            text = json.dumps(db, indent=2, default=str)
        try:
            _atomic_write_text(self.path, text)
        except OSError as exc:
            raise RecordStoreError(f"Cannot write {self.path}: {exc}") from exc

    # -------------------------
    # RecordStore API
    # -------------------------
    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
    ) -> list[dict]:
        rows = [r for r in self.load().get(table, []) if _matches(r, filters)]
        if order is not None:
            column, descending = order
            rows.sort(key=_sort_key(column), reverse=descending)
        return rows

    def insert(self, table: str, record: Mapping[str, Any]) -> dict:
        db = self.load()
        row = dict(record)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", _now())
        db.setdefault(table, []).append(row)
        self.save(db)
        logger.debug("Inserted into %s id=%s", table, row["id"])
        return dict(row)

    def update(self, table: str, record: Mapping[str, Any], match: Mapping[str, Any]) -> list[dict]:
        if not match:
            raise RecordStoreError("update() requires a non-empty match")
        db = self.load()
        updated: list[dict] = []
        for row in db.get(table, []):
            if _matches(row, match):
                row.update(record)
                updated.append(dict(row))
        self.save(db)
        logger.debug("Updated %d row(s) in %s matching %s", len(updated), table, dict(match))
        return updated
