"""Mirror busy time from a source calendar into the primary calendar.

One pass reads the primary and source calendars over the lookahead window,
creates a placeholder for every eligible source event that has none yet, and
deletes placeholders whose source event no longer exists. Placeholders are
never updated in place.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from busy_blocker.models import BlockerConfig, CalendarEvent, PlaceholderDraft
from integration.providers.base import CalendarProvider
from sync.days import local_now, lookahead_window, ooo_days
from sync.filters import FilterContext, Rejection, build_pipeline, partition
from sync.tags import tag_for

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """Outcome of one reconcile pass.

    ``created`` holds source event ids that got a placeholder, ``deleted``
    and ``duplicates_deleted`` hold primary-calendar placeholder ids.
    """

    source_calendar_id: str
    tag: str
    created: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    duplicates_deleted: List[str] = field(default_factory=list)
    rejected: List[Rejection] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.created or self.deleted or self.duplicates_deleted)


def index_placeholders(
    events: List[CalendarEvent], tag: str
) -> Tuple[Dict[str, CalendarEvent], List[CalendarEvent]]:
    """Map source event id to its placeholder for one tag.

    Returns the mapping plus any extra placeholders pointing at an already
    mapped source event.
    """
    known: Dict[str, CalendarEvent] = {}
    duplicates: List[CalendarEvent] = []
    for event in events:
        source_id = event.get_tag(tag)
        if source_id is None:
            continue
        if source_id in known:
            duplicates.append(event)
        else:
            known[source_id] = event
    return known, duplicates


class Reconciler:

    def __init__(
        self,
        provider: CalendarProvider,
        config: BlockerConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.provider = provider
        self.config = config
        self.clock = clock or (lambda: local_now(config.timezone))
        self.pipeline = build_pipeline(config)

    def _draft_for(self, event: CalendarEvent, tag: str) -> PlaceholderDraft:
        return PlaceholderDraft(
            title=self.config.blocked_event_title,
            start=event.start,
            end=event.end,
            tags={tag: event.event_id},
            color=self.config.color,
            remove_reminders=True,
        )

    def _delete(self, event: CalendarEvent) -> None:
        if not self.config.dry_run:
            self.provider.delete_event(self.config.primary_calendar_id, event.event_id)

    def reconcile(self, source_calendar_id: str) -> ReconcileReport:
        tag = tag_for(source_calendar_id)
        primary_id = self.config.primary_calendar_id
        start, end = lookahead_window(self.clock(), self.config.days_to_block_in_advance)
        report = ReconcileReport(
            source_calendar_id=source_calendar_id, tag=tag, dry_run=self.config.dry_run
        )

        primary_events = self.provider.list_events(primary_id, start, end)
        known, duplicates = index_placeholders(primary_events, tag)
        context = FilterContext.from_config(
            self.config,
            known_event_ids=known.keys(),
            ooo_days=ooo_days(primary_events),
        )

        source_events = self.provider.list_events(source_calendar_id, start, end)
        logger.info(
            f"{source_calendar_id}: {len(source_events)} source events, "
            f"{len(known)} existing placeholders between {start:%Y-%m-%d %H:%M} and {end:%Y-%m-%d %H:%M}"
        )

        eligible, report.rejected = partition(source_events, self.pipeline, context)
        for rejection in report.rejected:
            logger.info(
                f"Not blocking '{rejection.title}' ({rejection.event_id}) because {rejection.reason}"
            )

        for event in eligible:
            if not self.config.dry_run:
                self.provider.create_event(primary_id, self._draft_for(event, tag))
            report.created.append(event.event_id)
            logger.info(f"Blocked '{event.title}' {event.start:%Y-%m-%d %H:%M} - {event.end:%H:%M}")

        # deletion depends only on existence, never on eligibility
        live_ids = {e.event_id for e in source_events}
        for source_id, placeholder in known.items():
            if source_id in live_ids:
                continue
            self._delete(placeholder)
            report.deleted.append(placeholder.event_id)
            logger.info(
                f"Removed blocked event {placeholder.event_id} at {placeholder.start:%Y-%m-%d %H:%M}: "
                f"source event {source_id} is gone"
            )

        for placeholder in duplicates:
            self._delete(placeholder)
            report.duplicates_deleted.append(placeholder.event_id)
            logger.warning(
                f"Removed duplicate blocked event {placeholder.event_id} for source event "
                f"{placeholder.get_tag(tag)}"
            )

        return report
