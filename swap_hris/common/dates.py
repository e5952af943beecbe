"""Business-calendar date helpers.

Every "days between" and "same day" comparison is made in the configured
business timezone (WIB by default), never in the host machine's zone.
Calendar dates are anchored at midnight of that day in the business zone.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from swap_hris.common.constants import DATE_FORMAT
from swap_hris.config import settings

_SECONDS_PER_DAY = 86400


def business_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def business_now() -> datetime:
    """Current instant in the business timezone."""
    return datetime.now(business_timezone())


def to_business_time(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert *moment* into the business zone; naive values are taken as
    already being business-local wall time."""
    tz = tz or business_timezone()
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


# ── Parsing ─────────────────────────────────────────────────────────

_YEAR_FIRST = re.compile(r"^\d{4}[/.\-]")

# A component missing from the text shows up as a difference between
# parses filled from these two defaults.
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


def _parse_loose(text: str, default: datetime) -> datetime:
    # Month-first like the sheet's browser Date reading (3/4/2025 is 4 March),
    # year-first when the text opens with a four-digit year.
    return date_parser.parse(
        text,
        default=default,
        dayfirst=False,
        yearfirst=bool(_YEAR_FIRST.match(text)),
    )


def _parse_text(value: str) -> Optional[datetime]:
    text = value.strip()
    if not text:
        return None
    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        parsed = _parse_loose(text, _FILL_A)
        if parsed.date() != _parse_loose(text, _FILL_B).date():
            return None
        return parsed
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> Optional[date]:
    """Coerce a date-ish value into a ``date``; ``None`` when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        parsed = _parse_text(value)
        return parsed.date() if parsed else None
    return None


def parse_datetime(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Coerce a timestamp-ish value into an aware ``datetime``.

    Naive values are read as business-local time; bare dates as midnight.
    """
    tz = tz or business_timezone()
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_business_time(value, tz)
    if isinstance(value, date):
        return start_of_day(value, tz)
    if isinstance(value, str):
        parsed = _parse_text(value)
        return to_business_time(parsed, tz) if parsed else None
    return None


# ── Arithmetic ──────────────────────────────────────────────────────

def start_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz or business_timezone())


def _ceil_days(delta: timedelta) -> int:
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def days_until(day: date, now: datetime) -> int:
    """Whole days from *now* until the start of *day*, rounded up."""
    return _ceil_days(start_of_day(day, now.tzinfo) - now)


def days_since(moment: datetime, now: datetime) -> int:
    """Whole days elapsed from *moment* to *now*, rounded up."""
    return _ceil_days(now - moment)


def is_same_day(day: date, now: datetime) -> bool:
    return day == now.date()


def occurrence_in_year(day: date, year: int) -> date:
    """Same month/day in *year*; Feb 29 falls on Mar 1 in common years."""
    try:
        return day.replace(year=year)
    except ValueError:
        return date(year, 3, 1)


def add_months(day: date, months: int) -> date:
    """Calendar-month addition, clamped to the target month's last day."""
    return day + relativedelta(months=months)


def month_end(month_start: date) -> date:
    return month_start.replace(day=1) + relativedelta(months=1, days=-1)


def trailing_month_starts(today: date, count: int) -> list[date]:
    """First day of each of the last *count* months, oldest first."""
    first = today.replace(day=1)
    return [first - relativedelta(months=offset) for offset in range(count - 1, -1, -1)]


def years_of_service(join_date: date, now: datetime) -> int:
    """Plain calendar-year difference, not adjusted for month/day."""
    return now.year - join_date.year


def format_display_date(day: Optional[date]) -> str:
    if day is None:
        return "-"
    return day.strftime(DATE_FORMAT)
