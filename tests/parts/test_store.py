"""InventoryStore mutations and write-through persistence."""

from datetime import datetime, timedelta, timezone

import pytest

from modules.parts.errors import NotFoundError, PersistenceUnavailable, ValidationError
from modules.parts.health import PartStatus, evaluate_health
from modules.parts.models import PartDraft
from modules.parts.persistence import MemoryGateway
from modules.parts.seed import default_parts, no_parts
from modules.parts.store import InventoryStore

START = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FailingGateway(MemoryGateway):
    def __init__(self):
        super().__init__()
        self.fail_saves = False
        self.fail_loads = False

    def load(self):
        if self.fail_loads:
            raise PersistenceUnavailable("disk gone")
        return super().load()

    def save(self, parts):
        if self.fail_saves:
            raise PersistenceUnavailable("disk full")
        super().save(parts)


@pytest.fixture()
def clock():
    return Clock(START)


@pytest.fixture()
def gateway():
    return FailingGateway()


@pytest.fixture()
def inventory(gateway, clock):
    store = InventoryStore(gateway, seed=default_parts, clock=clock)
    store.bootstrap()
    return store


HOSE = {
    "machine_id": "M-09",
    "name": "Hose",
    "category": "Hydraulics",
    "lifespan_days": 180,
    "install_date": START,
}


def test_bootstrap_uses_seed_and_writes_it(inventory, gateway):
    assert [p.id for p in inventory.list()] == ["1", "2", "3", "4", "5"]
    assert gateway.saves == 1
    assert gateway.load() == inventory.list()


def test_bootstrap_prefers_stored_snapshot(gateway, clock):
    first = InventoryStore(gateway, seed=default_parts, clock=clock)
    first.bootstrap()
    first.add(HOSE)

    second = InventoryStore(gateway, seed=default_parts, clock=clock)
    second.bootstrap()
    assert second.list() == first.list()


def test_empty_start_is_not_stored(gateway, clock):
    empty = InventoryStore(gateway, seed=no_parts, clock=clock)
    assert empty.bootstrap() == []
    assert gateway.saves == 0
    assert gateway.load() is None

    seeded = InventoryStore(gateway, seed=default_parts, clock=clock)
    assert len(seeded.bootstrap()) == 5


def test_unreadable_snapshot_falls_back_to_seed(gateway, clock):
    gateway.blobs[gateway.key] = "{not json"
    store = InventoryStore(gateway, seed=default_parts, clock=clock)
    assert len(store.bootstrap()) == 5


def test_failed_load_falls_back_to_seed(gateway, clock):
    gateway.fail_loads = True
    store = InventoryStore(gateway, seed=default_parts, clock=clock)
    assert len(store.bootstrap()) == 5


def test_add_mints_unique_id_and_persists(inventory, gateway):
    before = {p.id for p in inventory.list()}
    part = inventory.add(HOSE)

    after = inventory.list()
    assert len(after) == len(before) + 1
    assert after[-1] == part
    assert part.id not in before
    assert gateway.load()[-1] == part


def test_add_rejects_invalid_draft_without_persisting(inventory, gateway):
    saves = gateway.saves
    with pytest.raises(ValidationError):
        inventory.add(dict(HOSE, lifespan_days=0))
    assert len(inventory.list()) == 5
    assert gateway.saves == saves


def test_add_checks_typed_drafts(inventory, gateway):
    saves = gateway.saves
    with pytest.raises(ValidationError) as exc:
        inventory.add(PartDraft(machine_id="M-1", name="x", category="General",
                                install_date=START, lifespan_days=0))
    assert "lifespan_days" in exc.value.errors
    assert len(inventory.list()) == 5
    assert gateway.saves == saves


def test_add_accepts_valid_typed_draft(inventory):
    part = inventory.add(PartDraft(machine_id="M-1", name="Belt", category="General",
                                   install_date=START, lifespan_days=30))
    assert inventory.get(part.id).lifespan_days == 30


def test_edit_keeps_id_and_replaces_fields(inventory):
    part = inventory.edit("2", dict(HOSE, name="Brake Pads (Rear)", machine_id="M-04"))
    assert part.id == "2"
    assert part.name == "Brake Pads (Rear)"
    assert part.machine_id == "M-04"
    assert part.lifespan_days == 180
    assert inventory.get("2") == part
    assert [p.id for p in inventory.list()] == ["1", "2", "3", "4", "5"]


def test_edit_unknown_id(inventory):
    with pytest.raises(NotFoundError):
        inventory.edit("nope", HOSE)


def test_edit_validates(inventory):
    with pytest.raises(ValidationError):
        inventory.edit("1", dict(HOSE, name=""))
    assert inventory.get("1").name == "Engine Air Filter"


def test_edit_checks_typed_drafts(inventory):
    with pytest.raises(ValidationError) as exc:
        inventory.edit("1", PartDraft(machine_id="", name="", category="General",
                                      install_date=START, lifespan_days=-3))
    assert set(exc.value.errors) == {"machine_id", "name", "lifespan_days"}
    assert inventory.get("1").name == "Engine Air Filter"


def test_clone_copies_description_not_machine(inventory, clock):
    part = inventory.clone("1", {"machine_id": "M-07"})
    source = inventory.get("1")
    assert part.id != source.id
    assert part.machine_id == "M-07"
    assert (part.name, part.category, part.lifespan_days) == (source.name, source.category, source.lifespan_days)
    assert part.install_date == clock.now


def test_clone_requires_a_machine(inventory):
    with pytest.raises(ValidationError) as exc:
        inventory.clone("1", {})
    assert "machine_id" in exc.value.errors


def test_clone_overrides_win(inventory):
    part = inventory.clone("1", {"machineId": "M-07", "installDate": "2025-01-01", "lifespanDays": 30})
    assert part.install_date == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert part.lifespan_days == 30


def test_clone_unknown_source(inventory):
    with pytest.raises(NotFoundError):
        inventory.clone("nope", {"machine_id": "M-07"})


def test_replace_resets_install_date_only(inventory, clock):
    before = inventory.get("5")
    assert evaluate_health(before, clock()).status is PartStatus.CRITICAL

    part = inventory.replace("5")
    assert part.install_date == clock.now
    assert (part.machine_id, part.name, part.category, part.lifespan_days) == (
        before.machine_id, before.name, before.category, before.lifespan_days)

    health = evaluate_health(part, clock())
    assert health.days_elapsed == 0
    assert health.percentage_used == 0
    assert health.status is PartStatus.GOOD


def test_replace_next_day_does_not_accumulate(inventory, clock):
    part = inventory.add(HOSE)
    clock.advance(days=1)
    replaced = inventory.replace(part.id)
    assert evaluate_health(replaced, clock()).days_elapsed == 0


def test_replace_again_moves_the_date(inventory, clock):
    first = inventory.replace("1")
    clock.advance(hours=5)
    second = inventory.replace("1")
    assert second.install_date > first.install_date


def test_replace_unknown_id(inventory):
    with pytest.raises(NotFoundError):
        inventory.replace("nope")


def test_failed_save_keeps_memory_and_can_be_flushed(inventory, gateway):
    gateway.fail_saves = True
    part = inventory.add(HOSE)

    assert inventory.get(part.id) == part
    assert inventory.dirty
    assert "disk full" in inventory.last_save_error
    assert part not in gateway.load()

    gateway.fail_saves = False
    assert inventory.flush() is True
    assert not inventory.dirty
    assert inventory.last_save_error is None
    assert gateway.load()[-1] == part


def test_list_is_a_snapshot(inventory):
    snapshot = inventory.list()
    snapshot.clear()
    assert len(inventory.list()) == 5
