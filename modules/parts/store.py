"""
InventoryStore: the single owner of the part list.

Every mutation goes through this class and is written through to the
persistence gateway before the call returns. A failed write keeps the
in-memory change (no rollback) and leaves the store ``dirty`` until a later
save succeeds; ``flush()`` retries it explicitly.

Mutations are serialized with a lock so the store can sit behind a threaded
WSGI server.
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Callable, Mapping, Optional

from flask import current_app

from .drafts import check_draft, normalize_payload, parse_draft
from .errors import NotFoundError, PersistenceUnavailable
from .models import Part, PartDraft, utcnow
from .persistence import PersistenceGateway, SqlBlobGateway
from .seed import default_parts, no_parts

log = logging.getLogger("partlife.store")

SeedFactory = Callable[[datetime], list[Part]]


class InventoryStore:
    def __init__(
        self,
        gateway: PersistenceGateway,
        seed: Optional[SeedFactory] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.gateway = gateway
        self.seed = seed
        self.clock = clock
        self._parts: list[Part] = []
        self._lock = threading.RLock()
        self.dirty = False
        self.last_save_error: Optional[str] = None

    # ------ bootstrap / persistence ------
    def bootstrap(self) -> list[Part]:
        """Load the stored snapshot; fall back to the seed when nothing usable is stored."""
        with self._lock:
            try:
                loaded = self.gateway.load()
            except PersistenceUnavailable as exc:
                log.warning("inventory load failed, using seed data: %s", exc)
                loaded = None

            if loaded is not None:
                self._parts = list(loaded)
                self.dirty = False
                log.info("loaded %d parts", len(self._parts))
                return self.list()

            self._parts = list(self.seed(self.clock())) if self.seed else []
            log.info("no stored inventory, starting with %d seed parts", len(self._parts))
            # an empty start is not stored, so a later run can still seed
            if self._parts:
                self._persist()
            return self.list()

    def _persist(self) -> bool:
        try:
            self.gateway.save(list(self._parts))
        except PersistenceUnavailable as exc:
            self.dirty = True
            self.last_save_error = str(exc)
            log.error("inventory save failed, in-memory state kept: %s", exc)
            return False
        self.dirty = False
        self.last_save_error = None
        return True

    def flush(self) -> bool:
        """Retry writing the current snapshot. Returns True once it is stored."""
        with self._lock:
            return self._persist()

    # ------ reads ------
    def list(self) -> list[Part]:
        with self._lock:
            return list(self._parts)

    def get(self, part_id: str) -> Part:
        with self._lock:
            return self._parts[self._index(part_id)]

    def _index(self, part_id: str) -> int:
        for i, part in enumerate(self._parts):
            if part.id == part_id:
                return i
        raise NotFoundError(part_id)

    def _mint_id(self) -> str:
        taken = {p.id for p in self._parts}
        while True:
            part_id = uuid.uuid4().hex
            if part_id not in taken:
                return part_id

    # ------ mutations ------
    def add(self, draft: Mapping | PartDraft) -> Part:
        draft = check_draft(draft) if isinstance(draft, PartDraft) else parse_draft(draft)
        with self._lock:
            part = Part.from_draft(self._mint_id(), draft)
            self._parts.append(part)
            self._persist()
        log.info("added part %s (%s on %s)", part.id, part.name, part.machine_id)
        return part

    def edit(self, part_id: str, draft: Mapping | PartDraft) -> Part:
        """Replace every field except ``id``."""
        with self._lock:
            index = self._index(part_id)
            draft = check_draft(draft) if isinstance(draft, PartDraft) else parse_draft(draft)
            part = self._parts[index].with_draft(draft)
            self._parts[index] = part
            self._persist()
        log.info("edited part %s", part_id)
        return part

    def clone(self, source_id: str, overrides: Optional[Mapping] = None) -> Part:
        """
        New part prefilled from ``source_id``: name, category and lifespan are
        copied, install date defaults to now. The machine is never copied, so
        ``overrides`` must name one.
        """
        with self._lock:
            source = self._parts[self._index(source_id)]
            payload = {
                "name": source.name,
                "category": source.category,
                "lifespan_days": source.lifespan_days,
                "install_date": self.clock(),
            }
            payload.update(normalize_payload(overrides or {}))
            part = self.add(parse_draft(payload))
        log.info("cloned part %s from %s", part.id, source_id)
        return part

    def replace(self, part_id: str) -> Part:
        """Reset the install date to now; nothing else changes."""
        with self._lock:
            index = self._index(part_id)
            part = self._parts[index].reinstalled(self.clock())
            self._parts[index] = part
            self._persist()
        log.info("replaced part %s", part_id)
        return part


# ------ Flask wiring ------
def init_store(app) -> InventoryStore:
    """Create the app-wide store on the configured blob key and load it."""
    seed = default_parts if app.config.get("SEED_DEFAULT_PARTS", True) else no_parts
    store = InventoryStore(SqlBlobGateway(app.config["INVENTORY_STORAGE_KEY"]), seed=seed)
    with app.app_context():
        store.bootstrap()
    app.extensions["inventory_store"] = store
    return store


def current_store() -> InventoryStore:
    return current_app.extensions["inventory_store"]
