from datetime import date, datetime, timedelta
from typing import Callable, Optional

from django.utils import timezone

from ..config import DAY_BOUNDARY_TZ

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return timezone.now()


def _aware(dt: datetime) -> datetime:
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"naive datetime not allowed: {dt!r}")
    return dt


def calendar_day(dt: datetime) -> date:
    """Day bucket of ``dt`` in the reference zone."""
    return _aware(dt).astimezone(DAY_BOUNDARY_TZ).date()


def day_gap(earlier: datetime, later: datetime) -> int:
    """Calendar days from ``earlier`` to ``later``; negative if ``later`` is before."""
    return (calendar_day(later) - calendar_day(earlier)).days


def same_day(a: datetime, b: datetime) -> bool:
    return day_gap(a, b) == 0


def add_calendar_days(dt: datetime, days: int) -> datetime:
    # The reference zone has no DST, so a calendar day is always 24h
    return _aware(dt).astimezone(DAY_BOUNDARY_TZ) + timedelta(days=days)


def to_utc_iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.astimezone(DAY_BOUNDARY_TZ).isoformat() if dt is not None else None
