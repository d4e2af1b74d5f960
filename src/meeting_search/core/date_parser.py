"""Resolution of absolute and relative date expressions."""

import calendar
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..models.document import parse_timestamp
from ..models.query import DateRange
from .exceptions import DateParseError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = (
    'ISO8601 (2025-01-15), "today", "yesterday", "last week", "last month", '
    '"this week", "this month", "last N days/weeks/months"'
)

_ISO_PREFIX = re.compile(r'^\d{4}-\d{2}-\d{2}')
_LAST_N = re.compile(r'^last\s+(\d+)\s+(day|week|month)s?$')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def _subtract_months(moment: datetime, months: int) -> datetime:
    """Move back whole calendar months, clamping the day to the month length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_relative_date(text: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse a relative or absolute date expression into a UTC instant.

    Supports, in order of precedence:
    - ISO8601 dates and date-times: "2025-01-15", "2025-01-15T10:30:00Z"
    - "today", "yesterday", "last week", "last month"
    - "this week" (most recent Monday), "this month" (first of the month)
    - "last N days", "last N weeks", "last N months"

    Relative expressions resolve to the start of the day.

    Args:
        text: Date expression
        now: Reference instant (defaults to the current time)

    Returns:
        Timezone-aware UTC datetime

    Raises:
        DateParseError: If the expression is not supported or resolves
            outside the representable date range
    """
    if not text or not isinstance(text, str):
        raise DateParseError("Date input must be a non-empty string")

    now = now or _utcnow()
    lowered = text.strip().lower()

    if _ISO_PREFIX.match(text.strip()):
        parsed = parse_timestamp(text)
        if parsed is not None:
            return parsed

    try:
        if lowered == "today":
            return _start_of_day(now)
        if lowered == "yesterday":
            return _start_of_day(now - timedelta(days=1))
        if lowered == "last week":
            return _start_of_day(now - timedelta(days=7))
        if lowered == "last month":
            return _start_of_day(_subtract_months(now, 1))
        if lowered == "this week":
            return _start_of_day(now - timedelta(days=now.weekday()))
        if lowered == "this month":
            return _start_of_day(now.replace(day=1))

        match = _LAST_N.match(lowered)
        if match:
            count = int(match.group(1))
            unit = match.group(2)
            if count <= 0:
                raise DateParseError(f"Invalid count in date pattern: {text}")
            if unit == "day":
                return _start_of_day(now - timedelta(days=count))
            if unit == "week":
                return _start_of_day(now - timedelta(weeks=count))
            return _start_of_day(_subtract_months(now, count))
    except DateParseError:
        raise
    except (OverflowError, ValueError) as e:
        raise DateParseError(f"Date out of range: {text}") from e

    raise DateParseError(f"Cannot parse date: {text}. Supported formats: {SUPPORTED_FORMATS}")


def parse_date_range(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[datetime] = None
) -> DateRange:
    """
    Resolve independent start/end expressions into an inclusive range.

    A side that is missing or fails to parse stays open. The end bound is
    moved to the last instant of its day.

    Args:
        start_date: Start expression
        end_date: End expression
        now: Reference instant for relative expressions

    Returns:
        Resolved DateRange
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    if start_date:
        try:
            start = parse_relative_date(start_date, now=now)
        except DateParseError as e:
            logger.warning(f"Failed to parse start date {start_date!r}: {e}")

    if end_date:
        try:
            end = _end_of_day(parse_relative_date(end_date, now=now))
        except DateParseError as e:
            logger.warning(f"Failed to parse end date {end_date!r}: {e}")

    return DateRange(start=start, end=end)
