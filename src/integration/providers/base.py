from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from busy_blocker.models import CalendarEvent, PlaceholderDraft


class CalendarProvider(ABC):
    @abstractmethod
    def list_events(self, calendar_id: str, start: datetime, end: datetime) -> List[CalendarEvent]:
        """
        Return single (expanded) event instances overlapping [start, end).
        Cancelled events must not be returned.
        """
        raise NotImplementedError

    @abstractmethod
    def create_event(self, calendar_id: str, draft: PlaceholderDraft) -> CalendarEvent:
        raise NotImplementedError

    @abstractmethod
    def delete_event(self, calendar_id: str, event_id: str) -> None:
        """
        Delete an event. Deleting an event that is already gone is not an error.
        """
        raise NotImplementedError
