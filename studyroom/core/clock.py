"""UTC time helpers shared by the scheduling services.

Every service accepts an optional ``now`` so that due dates, daily focus
resets and streaks can be tested deterministically.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else utc_now()


def date_key(moment: datetime) -> str:
    """UTC calendar day of *moment* as ``YYYY-MM-DD``."""
    return as_utc(moment).strftime("%Y-%m-%d")


def days_between(earlier_key: str, later_key: str) -> int:
    """Whole UTC days from *earlier_key* to *later_key* (negative if reversed)."""
    return (date.fromisoformat(later_key) - date.fromisoformat(earlier_key)).days
