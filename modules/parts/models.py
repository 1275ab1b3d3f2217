"""Models for the parts lifetime domain.

``Part`` is an immutable value record held by the inventory store; edits and
replacements swap the record for a new one. The database only keeps the
serialized snapshot of the whole inventory (``InventoryBlob``).
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from extensions import db

# ---------- Справочники ----------
CATEGORY_SUGGESTIONS = [
    "General",
    "Engine",
    "Hydraulics",
    "Electronics",
    "Transmission",
    "Brakes",
    "HVAC",
    "Filters",
    "Fluids",
    "Belts",
    "Sensors",
]
DEFAULT_CATEGORY = "General"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class PartDraft:
    """Validated field set for creating or editing a part (everything but ``id``)."""

    machine_id: str
    name: str
    category: str
    install_date: datetime
    lifespan_days: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class Part:
    """A replaceable component installed on a machine."""

    id: str
    machine_id: str
    name: str
    category: str
    install_date: datetime
    lifespan_days: int
    notes: Optional[str] = None

    @classmethod
    def from_draft(cls, part_id: str, draft: PartDraft) -> "Part":
        return cls(
            id=part_id,
            machine_id=draft.machine_id,
            name=draft.name,
            category=draft.category,
            install_date=as_utc(draft.install_date),
            lifespan_days=draft.lifespan_days,
            notes=draft.notes,
        )

    def with_draft(self, draft: PartDraft) -> "Part":
        return Part.from_draft(self.id, draft)

    def reinstalled(self, at: datetime) -> "Part":
        return replace(self, install_date=as_utc(at))

    def to_record(self) -> dict:
        """Serialized form used by the snapshot blob."""
        record = {
            "id": self.id,
            "machineId": self.machine_id,
            "name": self.name,
            "category": self.category,
            "installDate": self.install_date.isoformat(),
            "lifespanDays": self.lifespan_days,
        }
        if self.notes is not None:
            record["notes"] = self.notes
        return record

    @classmethod
    def from_record(cls, record: dict) -> "Part":
        raw_date = record["installDate"]
        if raw_date.endswith("Z"):
            raw_date = raw_date[:-1] + "+00:00"
        return cls(
            id=str(record["id"]),
            machine_id=record["machineId"],
            name=record["name"],
            category=record.get("category") or DEFAULT_CATEGORY,
            install_date=as_utc(datetime.fromisoformat(raw_date)),
            lifespan_days=int(record["lifespanDays"]),
            notes=record.get("notes"),
        )


class InventoryBlob(db.Model):
    """Key/value row holding a serialized inventory snapshot."""

    __tablename__ = "inventory_blobs"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False)
    payload = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<InventoryBlob {self.key}>"
