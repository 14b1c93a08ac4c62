# perfmon/dates.py
"""Date helpers shared by forms, reports and the dashboard"""

import calendar
from datetime import date, datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from .config import config


def today() -> date:
    """Current date in the configured business timezone"""
    tz = config.get_app_setting("TIMEZONE", "Asia/Jakarta")
    return datetime.now(ZoneInfo(tz)).date()


def month_range(day: Optional[date] = None) -> Tuple[date, date]:
    """First and last day of the calendar month containing `day`"""
    day = day or today()
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def days_in_range(start: date, end: date) -> int:
    """Inclusive day count; 0 for an inverted range"""
    return max((end - start).days + 1, 0)


def as_date(value) -> Optional[date]:
    """Coerce DB values (date, datetime, ISO string, Timestamp) to date"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if hasattr(value, 'to_pydatetime'):
        return value.to_pydatetime().date()
    return date.fromisoformat(str(value)[:10])
