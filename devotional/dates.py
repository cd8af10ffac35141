"""Calendar-day normalization.

All plan arithmetic works on plain ``datetime.date`` values. Anything coming
from a user or a clock is reduced to its wall-clock year/month/day first, so
timezone offsets can never shift a day by one.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from .errors import ValidationError

BR_DATE_FORMAT = "%d/%m/%Y"


def normalize(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to its calendar day.

    Time of day and timezone are discarded without conversion: 23:30 at
    UTC-3 on the 1st stays the 1st.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    # datetime is a date subclass; rebuild to drop time and tzinfo
    return date(value.year, value.month, value.day)


def parse_day(text: str | None) -> date:
    """Parse a user-entered date (ISO or DD/MM/YYYY)."""
    if text is None or not text.strip():
        raise ValidationError("Data não informada.")

    text = text.strip()
    try:
        return normalize(text)
    except ValueError:
        pass

    try:
        return datetime.strptime(text, BR_DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Data inválida: {text!r}") from None


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole-day difference between two normalized days."""
    return (normalize(end) - normalize(start)).days


def today_in(tz_name: str) -> date:
    """Current calendar day in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()
