"""Snapshot storage for the inventory.

The store hands over the full list of parts on every mutation; gateways only
(de)serialize that list under one key.
"""

import json
import logging
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from extensions import db

from .errors import PersistenceUnavailable
from .models import InventoryBlob, Part

log = logging.getLogger("partlife.persistence")


class PersistenceGateway(Protocol):
    def load(self) -> Optional[list[Part]]:
        ...

    def save(self, parts: list[Part]) -> None:
        ...


def dump_parts(parts: list[Part]) -> str:
    return json.dumps([p.to_record() for p in parts], ensure_ascii=False)


def load_parts(payload: str) -> list[Part]:
    """Raise ``PersistenceUnavailable`` when the payload is not a valid snapshot."""
    try:
        records = json.loads(payload)
        if not isinstance(records, list):
            raise TypeError("snapshot is not a list")
        return [Part.from_record(r) for r in records]
    except (TypeError, ValueError, KeyError, AttributeError) as exc:
        raise PersistenceUnavailable(f"unreadable inventory snapshot: {exc}") from exc


class SqlBlobGateway:
    """Keeps the snapshot in the ``inventory_blobs`` table. Needs an app context."""

    def __init__(self, key: str) -> None:
        self.key = key

    def load(self) -> Optional[list[Part]]:
        try:
            row = InventoryBlob.query.filter_by(key=self.key).first()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceUnavailable(f"cannot read {self.key!r}: {exc}") from exc
        if row is None:
            return None
        return load_parts(row.payload)

    def save(self, parts: list[Part]) -> None:
        payload = dump_parts(parts)
        try:
            row = InventoryBlob.query.filter_by(key=self.key).first()
            if row is None:
                row = InventoryBlob(key=self.key, payload=payload)
                db.session.add(row)
            else:
                row.payload = payload
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceUnavailable(f"cannot write {self.key!r}: {exc}") from exc
        log.debug("saved %d parts under %s", len(parts), self.key)


class MemoryGateway:
    """Dict-backed blob store, used by scripts and tests."""

    def __init__(self, key: str = "partlife_manager_data", blobs: Optional[dict] = None) -> None:
        self.key = key
        self.blobs = blobs if blobs is not None else {}
        self.saves = 0

    def load(self) -> Optional[list[Part]]:
        payload = self.blobs.get(self.key)
        if payload is None:
            return None
        return load_parts(payload)

    def save(self, parts: list[Part]) -> None:
        self.blobs[self.key] = dump_parts(parts)
        self.saves += 1
