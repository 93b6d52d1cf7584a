from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Data inválida: {value!r}")


def optional_date(value: Union[str, date, None]) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    for day in (value.day, 30, 29, 28):
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    raise ValueError(f"Cannot shift {value} by {months} months")


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    return date.fromordinal(add_months(month_start(value), 1).toordinal() - 1)


def db_timestamp() -> datetime:
    """Naive UTC timestamp as stored in DATETIME columns."""
    return now_utc().replace(tzinfo=None)
