from datetime import datetime

import pytest

from busy_blocker.models import BlockerConfig, CalendarEvent
from integration.providers.memory_provider import MemoryProvider

PRIMARY = "primary"
WORK = "work@example.com"
PERSONAL = "personal@example.com"

# Monday
NOW = datetime(2026, 1, 5, 8, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_config():
    def _make(**kwargs):
        kwargs.setdefault("source_calendar_ids", [WORK])
        kwargs.setdefault("primary_calendar_id", PRIMARY)
        return BlockerConfig(**kwargs)
    return _make


@pytest.fixture
def make_event():
    def _make(event_id, start, end, title="Meeting", all_day=False, tags=None):
        return CalendarEvent(
            event_id=event_id,
            title=title,
            start=start,
            end=end,
            is_all_day=all_day,
            tags=tags or {},
        )
    return _make


@pytest.fixture
def provider():
    return MemoryProvider()
