"""
Integer trade-date helpers.

Trade dates travel through the engine as integers in YYYYMMDD form; these
helpers convert to and from calendar dates (UTC) for day arithmetic.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Union

IntDate = int


def to_int_date(d: Union[date, datetime]) -> IntDate:
    """Convert a date/datetime to YYYYMMDD."""
    return d.year * 10000 + d.month * 100 + d.day


def from_int_date(value: IntDate) -> date:
    """
    Convert YYYYMMDD to a date.

    Raises:
        ValueError: If the integer is not a valid calendar date
    """
    value = int(value)
    return date(value // 10000, (value // 100) % 100, value % 100)


def parse_int_date(text: str) -> IntDate:
    """Parse 'YYYYMMDD' or 'YYYY-MM-DD' into an integer date (validated)."""
    cleaned = str(text).strip().replace("-", "")
    if len(cleaned) != 8 or not cleaned.isdigit():
        raise ValueError(f"Invalid date '{text}', expected YYYYMMDD or YYYY-MM-DD")
    value = int(cleaned)
    from_int_date(value)
    return value


def add_days_int(value: IntDate, delta: int) -> IntDate:
    """Shift an integer date by delta calendar days."""
    return to_int_date(from_int_date(value) + timedelta(days=delta))


def today_int_utc() -> IntDate:
    return to_int_date(datetime.now(timezone.utc))


def days_ago_int_utc(days: int) -> IntDate:
    return add_days_int(today_int_utc(), -days)
