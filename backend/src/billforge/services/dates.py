"""
Anchor date parsing and calendar-month arithmetic.

The anchor date is the billing date every relative placeholder is evaluated
against. It is validated once, up front, so a bad value can never silently
turn into a zero date further down the pipeline.
"""

import calendar
import logging
from datetime import date, datetime, timedelta

from billforge.domain.errors import InvalidAnchorDateError

logger = logging.getLogger(__name__)


# Accepted billing date layouts, most specific first
ANCHOR_DATE_FORMATS = [
    "%Y-%m-%d",           # 2024-01-15
    "%Y-%m-%d %H:%M",     # 2024-01-15 09:30
    "%Y-%m-%d %H:%M:%S",  # 2024-01-15 09:30:00
    "%Y-%m-%dT%H:%M:%S",  # 2024-01-15T09:30:00
    "%Y-%m",              # 2024-01 (first of the month)
]

# Fixed English abbreviations; %b would follow the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_anchor_date(text: str) -> date:
    """
    Parse a billing date string into a date.

    Args:
        text: Billing date as supplied by the caller, e.g. "2024-01-15"

    Returns:
        The parsed date (any time component is dropped)

    Raises:
        InvalidAnchorDateError: If no accepted layout matches
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidAnchorDateError(text)

    cleaned = text.strip()
    for fmt in ANCHOR_DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    logger.debug(f"No anchor date format matched '{text}'")
    raise InvalidAnchorDateError(text)


def beginning_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    """Last calendar day of the month containing ``day``."""
    _, last = calendar.monthrange(day.year, day.month)
    return day.replace(day=last)


def first_of_month_after(day: date, months: int) -> date:
    """First day of the month ``months`` months after the one containing ``day``."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def end_of_next_month(day: date) -> date:
    """Last day of the following month: first of the month after next, minus a day."""
    return first_of_month_after(day, 2) - timedelta(days=1)


def format_short(day: date) -> str:
    """Format as MM/DD/YY."""
    return f"{day.month:02d}/{day.day:02d}/{day.year % 100:02d}"


def format_long(day: date) -> str:
    """Format as e.g. "Feb 1, 2024"."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}, {day.year}"
