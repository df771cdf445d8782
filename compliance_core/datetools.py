# compliance_core/datetools.py
from datetime import date, datetime
from typing import Any, Optional

from compliance_core.errors import InvalidInput


def normalize_day(value: Any) -> date:
    """Collapse a date, datetime or ISO string to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            # Timestamps from the database arrive as "2021-06-01T00:00:00+00:00"
            if "T" in raw or " " in raw:
                return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
            return date.fromisoformat(raw)
        except ValueError:
            raise InvalidInput(f"Malformed date: {value!r}")
    raise InvalidInput(f"Expected a date, got {type(value).__name__}")


def parse_optional_day(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return normalize_day(value)


def add_years(day: date, years: int) -> date:
    """Calendar-year arithmetic; 29 Feb lands on 28 Feb in non-leap years."""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return day.replace(year=day.year + years, day=28)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def age_on(date_of_birth: date, on: date) -> int:
    """Completed years of age on a given day."""
    years = on.year - date_of_birth.year
    if (on.month, on.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


def format_date_range(start: date, end: date) -> str:
    """en-GB display form, e.g. '1 Jun 2021 to 1 Jul 2021'."""
    return f"{_format_day(start)} to {_format_day(end)}"


def _format_day(day: date) -> str:
    return f"{day.day} {day.strftime('%b')} {day.year}"
