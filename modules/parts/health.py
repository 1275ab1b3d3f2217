"""Wear/health derivation for installed parts.

Health is never stored: it is a projection of a part at an evaluation
instant. ``now`` is always passed in explicitly.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable

from .models import Part, as_utc

WARNING_THRESHOLD = 85.0
CRITICAL_THRESHOLD = 100.0
ONE_DAY = timedelta(days=1)


class PartStatus(str, Enum):
    GOOD = "GOOD"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class PartHealth:
    days_elapsed: int
    days_remaining: int
    percentage_used: float
    status: PartStatus

    def to_dict(self) -> dict:
        return {
            "days_elapsed": self.days_elapsed,
            "days_remaining": self.days_remaining,
            "percentage_used": self.percentage_used,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class HealthSummary:
    total: int
    critical: int
    warning: int
    good: int

    def to_dict(self) -> dict:
        return {"total": self.total, "critical": self.critical,
                "warning": self.warning, "good": self.good}


def status_for(percentage_used: float) -> PartStatus:
    if percentage_used >= CRITICAL_THRESHOLD:
        return PartStatus.CRITICAL
    if percentage_used >= WARNING_THRESHOLD:
        return PartStatus.WARNING
    return PartStatus.GOOD


def evaluate_health(part: Part, now: datetime) -> PartHealth:
    """
    Derive wear of ``part`` at ``now``.

    Elapsed time is the absolute distance to the install date rounded up to
    whole days, so a future install date counts the same as a past one.
    The percentage is not clamped; a part past its lifespan reads above 100.
    """
    distance = abs(as_utc(now) - as_utc(part.install_date))
    days_elapsed = math.ceil(distance / ONE_DAY)
    # multiply first: integer inputs land exactly on the 85/100 boundaries
    percentage_used = days_elapsed * 100 / part.lifespan_days
    return PartHealth(
        days_elapsed=days_elapsed,
        days_remaining=part.lifespan_days - days_elapsed,
        percentage_used=percentage_used,
        status=status_for(percentage_used),
    )


def health_by_id(parts: Iterable[Part], now: datetime) -> dict[str, PartHealth]:
    return {part.id: evaluate_health(part, now) for part in parts}


def summarize(health: dict[str, PartHealth]) -> HealthSummary:
    values = list(health.values())
    critical = sum(1 for h in values if h.status is PartStatus.CRITICAL)
    warning = sum(1 for h in values if h.status is PartStatus.WARNING)
    return HealthSummary(
        total=len(values),
        critical=critical,
        warning=warning,
        good=len(values) - critical - warning,
    )


def display_percentage(health: PartHealth) -> float:
    """Percentage capped at 100 for progress bars."""
    return min(health.percentage_used, CRITICAL_THRESHOLD)
