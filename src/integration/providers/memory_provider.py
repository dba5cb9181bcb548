from __future__ import annotations
import itertools
from datetime import datetime
from typing import Dict, List

from busy_blocker.models import CalendarEvent, PlaceholderDraft
from .base import CalendarProvider


class MemoryProvider(CalendarProvider):
    """
    Keeps calendars in process memory. Used by tests and for local dry runs.
    Records every create/delete call in ``calls``.
    """

    def __init__(self, calendars: Dict[str, List[CalendarEvent]] | None = None):
        self.calendars: Dict[str, Dict[str, CalendarEvent]] = {}
        self.calls: List[tuple] = []
        self._ids = itertools.count(1)
        for calendar_id, events in (calendars or {}).items():
            for event in events:
                self.add(calendar_id, event)

    def add(self, calendar_id: str, event: CalendarEvent) -> CalendarEvent:
        self.calendars.setdefault(calendar_id, {})[event.event_id] = event
        return event

    def events(self, calendar_id: str) -> List[CalendarEvent]:
        return list(self.calendars.get(calendar_id, {}).values())

    def list_events(self, calendar_id: str, start: datetime, end: datetime) -> List[CalendarEvent]:
        found = [
            e for e in self.events(calendar_id)
            if e.start < end and e.end > start
        ]
        return sorted(found, key=lambda e: (e.start, e.event_id))

    def create_event(self, calendar_id: str, draft: PlaceholderDraft) -> CalendarEvent:
        event = CalendarEvent(
            event_id=f"mem-{next(self._ids)}",
            title=draft.title,
            start=draft.start,
            end=draft.end,
            tags=dict(draft.tags),
            color=draft.color.value,
        )
        self.calls.append(("create", calendar_id, event.event_id))
        return self.add(calendar_id, event)

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        self.calls.append(("delete", calendar_id, event_id))
        self.calendars.get(calendar_id, {}).pop(event_id, None)
