"""Predicates deciding which source events block time on the primary calendar.

Each filter is a named, side-effect-free predicate paired with a human
readable reason. The reconciler evaluates them in order and reports the first
one that rejects an event.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from busy_blocker.models import BlockerConfig, CalendarEvent
from sync.days import day_key_of

SATURDAY = 5


@dataclass(frozen=True)
class FilterContext:
    """Per-run facts the predicates are evaluated against."""

    working_hours_start_at: int = 900
    working_hours_end_at: int = 1800
    known_event_ids: FrozenSet[str] = field(default_factory=frozenset)
    ooo_days: FrozenSet[date] = field(default_factory=frozenset)

    @classmethod
    def from_config(
        cls,
        config: BlockerConfig,
        known_event_ids: Iterable[str] = (),
        ooo_days: Iterable[date] = (),
    ) -> "FilterContext":
        return cls(
            working_hours_start_at=config.working_hours_start_at,
            working_hours_end_at=config.working_hours_end_at,
            known_event_ids=frozenset(known_event_ids),
            ooo_days=frozenset(ooo_days),
        )


@dataclass(frozen=True)
class EventFilter:
    name: str
    reason: str
    accepts: Callable[[CalendarEvent, FilterContext], bool]


@dataclass(frozen=True)
class Rejection:
    event_id: str
    title: str
    filter_name: str
    reason: str


def hhmm(instant: datetime) -> int:
    return instant.hour * 100 + instant.minute


def _end_hhmm(event: CalendarEvent) -> int:
    # an event running past midnight occupies the rest of its first day
    if day_key_of(event.end) > day_key_of(event.start):
        return 2400
    return hhmm(event.end)


def not_already_correlated(event: CalendarEvent, ctx: FilterContext) -> bool:
    return event.event_id not in ctx.known_event_ids


def within_working_hours(event: CalendarEvent, ctx: FilterContext) -> bool:
    return (
        hhmm(event.start) < ctx.working_hours_end_at
        and _end_hhmm(event) > ctx.working_hours_start_at
    )


def not_weekend(event: CalendarEvent, ctx: FilterContext) -> bool:
    return event.start.weekday() < SATURDAY


def not_ooo_day(event: CalendarEvent, ctx: FilterContext) -> bool:
    return day_key_of(event.start) not in ctx.ooo_days


def not_all_day(event: CalendarEvent, ctx: FilterContext) -> bool:
    return not event.is_all_day


ALREADY_CORRELATED = EventFilter(
    "already_correlated", "a blocked event already exists for it", not_already_correlated
)
OUTSIDE_WORKING_HOURS = EventFilter(
    "outside_working_hours", "it does not overlap working hours", within_working_hours
)
WEEKEND = EventFilter("weekend", "it starts on a weekend", not_weekend)
OOO_DAY = EventFilter(
    "ooo_day", "it falls on an all-day (out of office) day in the primary calendar", not_ooo_day
)
ALL_DAY = EventFilter("all_day", "it is an all-day event", not_all_day)


def build_pipeline(config: BlockerConfig) -> List[EventFilter]:
    """Filters enabled by ``config``, in evaluation order."""
    pipeline = [ALREADY_CORRELATED, OUTSIDE_WORKING_HOURS]
    if config.skip_weekends:
        pipeline.append(WEEKEND)
    if config.assume_all_day_events_in_work_calendar_is_ooo:
        pipeline.append(OOO_DAY)
    if config.skip_all_day_events:
        pipeline.append(ALL_DAY)
    return pipeline


def first_rejection(
    event: CalendarEvent, pipeline: List[EventFilter], ctx: FilterContext
) -> Optional[Rejection]:
    for f in pipeline:
        if not f.accepts(event, ctx):
            return Rejection(
                event_id=event.event_id,
                title=event.title,
                filter_name=f.name,
                reason=f.reason,
            )
    return None


def partition(
    events: Iterable[CalendarEvent], pipeline: List[EventFilter], ctx: FilterContext
) -> Tuple[List[CalendarEvent], List[Rejection]]:
    """Split ``events`` into eligible events and rejections, keeping order."""
    eligible: List[CalendarEvent] = []
    rejected: List[Rejection] = []
    for event in events:
        rejection = first_rejection(event, pipeline, ctx)
        if rejection is None:
            eligible.append(event)
        else:
            rejected.append(rejection)
    return eligible, rejected
