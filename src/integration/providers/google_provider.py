from __future__ import annotations
import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from busy_blocker.models import CalendarEvent, PlaceholderDraft
from .base import CalendarProvider

logger = logging.getLogger(__name__)

PAGE_SIZE = 250
GONE_STATUSES = {404, 410}


def _parse_boundary(payload: Dict[str, Any], zone: ZoneInfo) -> Tuple[datetime, bool]:
    """Return a naive wall-clock datetime and whether the boundary is a whole day."""
    if payload.get("dateTime"):
        instant = datetime.fromisoformat(payload["dateTime"])
        if instant.tzinfo is not None:
            instant = instant.astimezone(zone).replace(tzinfo=None)
        return instant, False
    if payload.get("date"):
        return datetime.combine(date.fromisoformat(payload["date"]), time()), True
    raise ValueError(f"event boundary has neither dateTime nor date: {payload!r}")


def event_from_payload(payload: Dict[str, Any], zone: ZoneInfo) -> Optional[CalendarEvent]:
    """Map a Google Calendar v3 event resource; cancelled events map to None."""
    if payload.get("status") == "cancelled":
        return None

    start, all_day = _parse_boundary(payload.get("start") or {}, zone)
    end, _ = _parse_boundary(payload.get("end") or {}, zone)
    private = (payload.get("extendedProperties") or {}).get("private") or {}

    return CalendarEvent(
        event_id=payload["id"],
        title=payload.get("summary", ""),
        start=start,
        end=end,
        is_all_day=all_day,
        tags={str(k): str(v) for k, v in private.items()},
        color=payload.get("colorId"),
    )


class GoogleCalendarProvider(CalendarProvider):

    def __init__(self, credentials=None, timezone: str = "UTC", service=None):
        self.timezone = timezone
        self.zone = ZoneInfo(timezone)
        # discovery cache is file based and noisy on recent google-auth versions
        self.service = service or build(
            "calendar",
            "v3",
            credentials=credentials,
            cache_discovery=False,
        )

    def _rfc3339(self, instant: datetime) -> str:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=self.zone)
        return instant.isoformat()

    def list_events(self, calendar_id: str, start: datetime, end: datetime) -> List[CalendarEvent]:
        params: Dict[str, Any] = {
            "calendarId": calendar_id,
            "timeMin": self._rfc3339(start),
            "timeMax": self._rfc3339(end),
            "timeZone": self.timezone,
            "singleEvents": True,
            "showDeleted": False,
            "orderBy": "startTime",
            "maxResults": PAGE_SIZE,
        }

        events: List[CalendarEvent] = []
        while True:
            response = self.service.events().list(**params).execute()
            for item in response.get("items", []):
                event = event_from_payload(item, self.zone)
                if event is not None:
                    events.append(event)

            page_token = response.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token

        logger.debug(f"Fetched {len(events)} events from {calendar_id}")
        return events

    def create_event(self, calendar_id: str, draft: PlaceholderDraft) -> CalendarEvent:
        body: Dict[str, Any] = {
            "summary": draft.title,
            "start": {"dateTime": self._rfc3339(draft.start), "timeZone": self.timezone},
            "end": {"dateTime": self._rfc3339(draft.end), "timeZone": self.timezone},
            "colorId": draft.color.value,
            "transparency": "opaque",
            "extendedProperties": {"private": dict(draft.tags)},
        }
        if draft.remove_reminders:
            body["reminders"] = {"useDefault": False, "overrides": []}

        created = self.service.events().insert(calendarId=calendar_id, body=body).execute()
        return event_from_payload(created, self.zone)

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        try:
            self.service.events().delete(calendarId=calendar_id, eventId=event_id).execute()
        except HttpError as e:
            if e.resp.status in GONE_STATUSES:
                logger.info(f"Event {event_id} already deleted from {calendar_id}")
                return
            raise
