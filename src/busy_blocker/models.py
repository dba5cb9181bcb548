from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator


class EventColor(str, Enum):
    """Google Calendar event colors, valued with their ``colorId``."""

    PALE_BLUE = "1"
    PALE_GREEN = "2"
    MAUVE = "3"
    PALE_RED = "4"
    YELLOW = "5"
    ORANGE = "6"
    CYAN = "7"
    GRAY = "8"
    BLUE = "9"
    GREEN = "10"
    RED = "11"


class CalendarEvent(BaseModel):
    """An event as read from a calendar backend.

    Instants are naive wall-clock datetimes in the configured timezone.
    All-day events run from midnight to midnight.
    """

    event_id: str = Field(..., min_length=1)
    title: str = ""
    start: datetime
    end: datetime
    is_all_day: bool = False
    tags: Dict[str, str] = Field(default_factory=dict)
    color: Optional[str] = None

    def get_tag(self, key: str) -> Optional[str]:
        return self.tags.get(key)

    def tag_keys(self) -> List[str]:
        return list(self.tags)


class PlaceholderDraft(BaseModel):
    """Everything needed to create one blocked event in a single call."""

    title: str = Field(..., min_length=1)
    start: datetime
    end: datetime
    tags: Dict[str, str] = Field(default_factory=dict)
    color: EventColor = EventColor.GRAY
    remove_reminders: bool = True


def _check_hhmm(value: int) -> int:
    if not 0 <= value <= 2400:
        raise ValueError(f"{value} is not an HHMM value between 0 and 2400")
    if value % 100 >= 60:
        raise ValueError(f"{value} has more than 59 minutes")
    return value


class BlockerConfig(BaseModel):
    source_calendar_ids: List[str] = Field(..., min_length=1)
    primary_calendar_id: str = "primary"

    days_to_block_in_advance: int = Field(14, ge=1, le=365)
    blocked_event_title: str = "Busy"

    skip_weekends: bool = True
    skip_all_day_events: bool = True
    assume_all_day_events_in_work_calendar_is_ooo: bool = True

    # HHMM integers, e.g. 900 is 09:00 and 1800 is 18:00
    working_hours_start_at: int = 900
    working_hours_end_at: int = 1800

    color: EventColor = EventColor.GRAY
    timezone: str = "Europe/Bratislava"

    dry_run: bool = False

    @field_validator("source_calendar_ids")
    @classmethod
    def calendar_ids_not_blank(cls, v: List[str]) -> List[str]:
        out: List[str] = []
        for cal_id in v:
            cal_id = cal_id.strip()
            if not cal_id:
                raise ValueError("source calendar ids must not be blank")
            if cal_id not in out:
                out.append(cal_id)
        return out

    @field_validator("primary_calendar_id", "blocked_event_title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("must not be blank")
        return v2

    @field_validator("working_hours_start_at", "working_hours_end_at")
    @classmethod
    def valid_hhmm(cls, v: int) -> int:
        return _check_hhmm(v)

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {v!r}") from e
        return v

    @model_validator(mode="after")
    def working_hours_ordered(self) -> "BlockerConfig":
        if self.working_hours_start_at >= self.working_hours_end_at:
            raise ValueError("working_hours_start_at must be before working_hours_end_at")
        return self

    @model_validator(mode="after")
    def primary_not_a_source(self) -> "BlockerConfig":
        # blocked events would be read back as source events on every run
        if self.primary_calendar_id in self.source_calendar_ids:
            raise ValueError("primary_calendar_id must not be one of source_calendar_ids")
        return self
