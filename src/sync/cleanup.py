from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Set

from busy_blocker.models import BlockerConfig
from integration.providers.base import CalendarProvider
from sync.days import local_now, lookahead_window
from sync.tags import tags_for

logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    tags: Set[str]
    deleted: List[str] = field(default_factory=list)
    dry_run: bool = False


class Cleanup:
    """Deletes every placeholder correlated to the configured source calendars.

    Correlation validity is not checked: any primary-calendar event in the
    lookahead window carrying one of the tags is removed.
    """

    def __init__(
        self,
        provider: CalendarProvider,
        config: BlockerConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.provider = provider
        self.config = config
        self.clock = clock or (lambda: local_now(config.timezone))

    def cleanup_all(self, source_calendar_ids: Optional[Iterable[str]] = None) -> CleanupReport:
        ids = list(source_calendar_ids) if source_calendar_ids is not None else self.config.source_calendar_ids
        tags = tags_for(ids)
        report = CleanupReport(tags=tags, dry_run=self.config.dry_run)

        primary_id = self.config.primary_calendar_id
        start, end = lookahead_window(self.clock(), self.config.days_to_block_in_advance)

        for event in self.provider.list_events(primary_id, start, end):
            if tags.isdisjoint(event.tag_keys()):
                continue
            if not self.config.dry_run:
                self.provider.delete_event(primary_id, event.event_id)
            report.deleted.append(event.event_id)
            logger.info(f"Deleted blocked event {event.event_id} at {event.start:%Y-%m-%d %H:%M}")

        logger.info(f"Cleanup removed {len(report.deleted)} blocked events for {len(ids)} calendars")
        return report
