"""Demo inventory used when no snapshot has been stored yet."""

from datetime import datetime, timedelta

from .models import Part, as_utc

# (id, machine, name, category, days since install, lifespan)
DEFAULT_PARTS = [
    ("1", "M-01", "Engine Air Filter", "Engine", 300, 365),
    ("2", "M-01", "Brake Pads (Front)", "Brakes", 60, 730),
    ("3", "M-02", "Synthetic Oil", "Engine", 170, 180),
    ("4", "M-02", "Timing Belt", "Transmission", 1000, 1800),
    ("5", "M-03", "Cabin Filter", "HVAC", 400, 365),
]


def default_parts(now: datetime) -> list[Part]:
    now = as_utc(now)
    return [
        Part(
            id=part_id,
            machine_id=machine,
            name=name,
            category=category,
            install_date=now - timedelta(days=age),
            lifespan_days=lifespan,
        )
        for part_id, machine, name, category, age, lifespan in DEFAULT_PARTS
    ]


def no_parts(now: datetime) -> list[Part]:
    return []
