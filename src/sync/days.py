from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Set, Tuple
from zoneinfo import ZoneInfo

from busy_blocker.models import CalendarEvent


def day_key_of(instant: datetime) -> date:
    """Reduce an instant to its local calendar day.

    The wall-clock date is taken as-is: an aware datetime is not converted to
    any other zone first.
    """
    return date(instant.year, instant.month, instant.day)


def ooo_days(events: Iterable[CalendarEvent]) -> Set[date]:
    """Day keys covered by all-day events, treated as out-of-office days.

    A multi-day all-day event marks every day it spans.
    """
    days: Set[date] = set()
    for event in events:
        if not event.is_all_day:
            continue
        day = day_key_of(event.start)
        last = max(day, day_key_of(event.end - timedelta(microseconds=1)))
        while day <= last:
            days.add(day)
            day += timedelta(days=1)
    return days


def local_now(timezone: str) -> datetime:
    """Current wall-clock time in ``timezone``, as a naive datetime."""
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


def lookahead_window(now: datetime, days: int) -> Tuple[datetime, datetime]:
    return now, now + timedelta(days=days)
