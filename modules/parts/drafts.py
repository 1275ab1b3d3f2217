"""Parsing and validation of part drafts coming from forms or JSON bodies."""

from dataclasses import asdict
from datetime import date, datetime, time, timezone
from typing import Mapping, Optional

from .errors import ValidationError
from .filters import ALL
from .models import DEFAULT_CATEGORY, Part, PartDraft, as_utc

# camelCase keys match the stored snapshot records
FIELD_ALIASES = {
    "machine_id": ("machine_id", "machineId"),
    "name": ("name",),
    "category": ("category",),
    "install_date": ("install_date", "installDate"),
    "lifespan_days": ("lifespan_days", "lifespanDays"),
    "notes": ("notes",),
}


def normalize_payload(payload: Mapping) -> dict:
    """Map aliased keys onto their snake_case field names, keeping only present fields."""
    normalized = {}
    for field, keys in FIELD_ALIASES.items():
        for key in keys:
            if key in payload:
                normalized[field] = payload[key]
                break
    return normalized


def _text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_install_date(value) -> datetime:
    """
    Accepts ``datetime``/``date`` objects, ``YYYY-MM-DD`` (midnight UTC) or a
    full ISO-8601 timestamp (``Z`` suffix allowed).
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    if len(raw) == 10:
        return datetime.combine(date.fromisoformat(raw), time.min, tzinfo=timezone.utc)
    return as_utc(datetime.fromisoformat(raw))


def parse_lifespan(value) -> int:
    if isinstance(value, bool):
        raise ValueError("must be a whole number of days")
    if isinstance(value, int):
        days = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError("must be a whole number of days")
        days = int(value)
    else:
        raw = str(value).strip()
        if not raw.lstrip("-").isdigit():
            raise ValueError("must be a whole number of days")
        days = int(raw)
    if days <= 0:
        raise ValueError("must be greater than zero")
    return days


def parse_draft(payload: Mapping) -> PartDraft:
    """Validate ``payload`` and build a draft; all field errors are reported at once."""
    errors: dict[str, str] = {}
    data = normalize_payload(payload)

    machine_id = _text(data.get("machine_id"))
    name = _text(data.get("name"))
    category = _text(data.get("category")) or DEFAULT_CATEGORY
    notes = _text(data.get("notes"))

    if not machine_id:
        errors["machine_id"] = "required"
    if not name:
        errors["name"] = "required"

    install_date = None
    raw_date = data.get("install_date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        errors["install_date"] = "required"
    else:
        try:
            install_date = parse_install_date(raw_date)
        except (TypeError, ValueError):
            errors["install_date"] = "not a valid date"

    lifespan_days = None
    raw_lifespan = data.get("lifespan_days")
    if raw_lifespan is None or (isinstance(raw_lifespan, str) and not raw_lifespan.strip()):
        errors["lifespan_days"] = "required"
    else:
        try:
            lifespan_days = parse_lifespan(raw_lifespan)
        except ValueError as exc:
            errors["lifespan_days"] = str(exc)

    if errors:
        raise ValidationError(errors)

    return PartDraft(
        machine_id=machine_id,
        name=name,
        category=category,
        install_date=install_date,
        lifespan_days=lifespan_days,
        notes=notes,
    )


def check_draft(draft: PartDraft) -> PartDraft:
    """Run a typed draft through the same field checks as a raw payload."""
    return parse_draft(asdict(draft))


def draft_to_dict(
    *,
    machine_id: str = "",
    name: str = "",
    category: str = DEFAULT_CATEGORY,
    install_date: Optional[datetime] = None,
    lifespan_days: Optional[int] = None,
    notes: Optional[str] = None,
) -> dict:
    return {
        "machine_id": machine_id,
        "name": name,
        "category": category,
        "install_date": install_date.date().isoformat() if install_date else "",
        "lifespan_days": lifespan_days,
        "notes": notes,
    }


def new_draft(selected_machine: Optional[str], now: datetime) -> dict:
    """Blank form values; the machine comes from the active filter unless it is 'all'."""
    machine = "" if not selected_machine or selected_machine == ALL else selected_machine
    return draft_to_dict(machine_id=machine, install_date=as_utc(now))


def edit_draft(part: Part) -> dict:
    return draft_to_dict(
        machine_id=part.machine_id,
        name=part.name,
        category=part.category,
        install_date=part.install_date,
        lifespan_days=part.lifespan_days,
        notes=part.notes,
    )


def clone_draft(source: Part, now: datetime) -> dict:
    """Clone prefill: descriptive fields from ``source``, blank machine, installed today."""
    return draft_to_dict(
        machine_id="",
        name=source.name,
        category=source.category,
        install_date=as_utc(now),
        lifespan_days=source.lifespan_days,
    )
