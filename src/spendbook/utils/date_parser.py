"""Date parsing utilities."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(value: Union[str, date, datetime]) -> datetime:
    """Parse a stored timestamp into a timezone-aware datetime.

    Naive values are taken to be UTC. Plain dates become midnight UTC.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, TypeError, OverflowError):
            try:
                parsed = date_parser.parse(value)
            except (ValueError, TypeError, OverflowError) as e:
                raise ValueError(f"Could not parse timestamp '{value}': {e}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def period_range(
    year: int, quarter: Optional[int] = None, month: Optional[int] = None
) -> tuple[date, date]:
    """Get the first and last day of a year, quarter or month.

    A month takes precedence over a quarter, which takes precedence over the
    whole year.

    Args:
        year: Calendar year
        quarter: Optional quarter 1-4
        month: Optional month 1-12

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If the quarter or month is out of range
    """
    start = date(year, 1, 1)
    span = relativedelta(years=1)

    if quarter is not None:
        if not 1 <= quarter <= 4:
            raise ValueError(f"Quarter must be between 1 and 4, got {quarter}")
        start = date(year, (quarter - 1) * 3 + 1, 1)
        span = relativedelta(months=3)

    if month is not None:
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        start = date(year, month, 1)
        span = relativedelta(months=1)

    return (start, start + span - timedelta(days=1))


def format_date_tag(value: Union[str, date, datetime, None]) -> Optional[str]:
    """Format a date as a debt cycle tag such as "NOV24".

    Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    try:
        parsed = parse_timestamp(value)
    except ValueError:
        return None
    return f"{_MONTHS[parsed.month - 1]}{parsed.year % 100:02d}"


def date_tag_sort_value(tag: Optional[str]) -> float:
    """Return a sortable number for a date tag (year * 100 + month index).

    Malformed tags sort as negative infinity.
    """
    if not tag or len(tag) < 5:
        return float("-inf")

    month_segment = tag[:3].upper()
    year_segment = tag[3:]
    if month_segment not in _MONTHS or not year_segment.isdigit():
        return float("-inf")

    return int(f"20{year_segment}") * 100 + _MONTHS.index(month_segment)
