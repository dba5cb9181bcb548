from datetime import datetime
from types import SimpleNamespace

import pytest
from googleapiclient.errors import HttpError

from busy_blocker.models import EventColor, PlaceholderDraft
from integration.providers.google_provider import GoogleCalendarProvider, event_from_payload
from zoneinfo import ZoneInfo

ZONE = ZoneInfo("Europe/Bratislava")


class _Request:
    def __init__(self, result):
        self._result = result

    def execute(self):
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


class FakeEvents:
    def __init__(self, pages=None, delete_error=None):
        self.pages = list(pages or [])
        self.delete_error = delete_error
        self.list_calls = []
        self.inserted = []
        self.deleted = []

    def list(self, **kwargs):
        self.list_calls.append(kwargs)
        return _Request(self.pages.pop(0))

    def insert(self, calendarId, body):
        self.inserted.append((calendarId, body))
        return _Request({"id": "new-1", **body})

    def delete(self, calendarId, eventId):
        self.deleted.append((calendarId, eventId))
        return _Request(self.delete_error or "")


class FakeService:
    def __init__(self, events):
        self._events = events

    def events(self):
        return self._events


def _http_error(status):
    return HttpError(SimpleNamespace(status=status, reason="error"), b"")


def test_payload_timed_event():
    event = event_from_payload(
        {
            "id": "abc",
            "summary": "Standup",
            "start": {"dateTime": "2026-01-05T09:00:00+01:00"},
            "end": {"dateTime": "2026-01-05T09:15:00+01:00"},
            "extendedProperties": {"private": {"blocker_x_src": "src-1"}},
        },
        ZONE,
    )
    assert event.start == datetime(2026, 1, 5, 9, 0)
    assert event.end == datetime(2026, 1, 5, 9, 15)
    assert not event.is_all_day
    assert event.get_tag("blocker_x_src") == "src-1"


def test_payload_all_day_event():
    event = event_from_payload(
        {"id": "ooo", "start": {"date": "2026-01-06"}, "end": {"date": "2026-01-07"}},
        ZONE,
    )
    assert event.is_all_day
    assert event.start == datetime(2026, 1, 6)
    assert event.tags == {}


def test_payload_cancelled_event_dropped():
    assert event_from_payload({"id": "x", "status": "cancelled"}, ZONE) is None


def test_list_events_follows_pages():
    item = {
        "id": "a",
        "start": {"dateTime": "2026-01-05T10:00:00+01:00"},
        "end": {"dateTime": "2026-01-05T11:00:00+01:00"},
    }
    events = FakeEvents(pages=[
        {"items": [item], "nextPageToken": "t2"},
        {"items": [dict(item, id="b"), {"id": "c", "status": "cancelled"}]},
    ])
    provider = GoogleCalendarProvider(timezone="Europe/Bratislava", service=FakeService(events))

    found = provider.list_events("work", datetime(2026, 1, 5, 8), datetime(2026, 1, 19, 8))

    assert [e.event_id for e in found] == ["a", "b"]
    first, second = events.list_calls
    assert first["singleEvents"] is True
    assert first["timeMin"] == "2026-01-05T08:00:00+01:00"
    assert first["timeZone"] == "Europe/Bratislava"
    assert "pageToken" not in first
    assert second["pageToken"] == "t2"


def test_create_event_body():
    events = FakeEvents()
    provider = GoogleCalendarProvider(timezone="Europe/Bratislava", service=FakeService(events))
    draft = PlaceholderDraft(
        title="Busy",
        start=datetime(2026, 1, 5, 10),
        end=datetime(2026, 1, 5, 11),
        tags={"blocker_x_src": "src-1"},
        color=EventColor.RED,
    )

    created = provider.create_event("primary", draft)

    [(calendar_id, body)] = events.inserted
    assert calendar_id == "primary"
    assert body["colorId"] == "11"
    assert body["reminders"] == {"useDefault": False, "overrides": []}
    assert body["extendedProperties"] == {"private": {"blocker_x_src": "src-1"}}
    assert created.event_id == "new-1"
    assert created.get_tag("blocker_x_src") == "src-1"
    assert created.start == datetime(2026, 1, 5, 10)


@pytest.mark.parametrize("status", [404, 410])
def test_delete_already_gone_is_ok(status):
    events = FakeEvents(delete_error=_http_error(status))
    provider = GoogleCalendarProvider(service=FakeService(events))
    provider.delete_event("primary", "x")
    assert events.deleted == [("primary", "x")]


def test_delete_other_errors_propagate():
    events = FakeEvents(delete_error=_http_error(403))
    provider = GoogleCalendarProvider(service=FakeService(events))
    with pytest.raises(HttpError):
        provider.delete_event("primary", "x")
