"""Entry points run by the scheduler: reconcile every source calendar, or purge."""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from busy_blocker.models import BlockerConfig
from integration.providers.base import CalendarProvider
from jobs.metrics import (
    EVENTS_REJECTED_TOTAL,
    LAST_SUCCESS_UNIXTIME,
    PLACEHOLDERS_CREATED_TOTAL,
    PLACEHOLDERS_DELETED_TOTAL,
    RUN_DURATION_SECONDS,
)
from sync.cleanup import Cleanup, CleanupReport
from sync.reconciler import Reconciler, ReconcileReport

logger = logging.getLogger(__name__)


def _record(report: ReconcileReport) -> None:
    for rejection in report.rejected:
        EVENTS_REJECTED_TOTAL.labels(reason=rejection.filter_name).inc()
    if report.dry_run:
        return
    PLACEHOLDERS_CREATED_TOTAL.labels(source=report.tag).inc(len(report.created))
    PLACEHOLDERS_DELETED_TOTAL.labels(source=report.tag, reason="source_gone").inc(len(report.deleted))
    PLACEHOLDERS_DELETED_TOTAL.labels(source=report.tag, reason="duplicate").inc(
        len(report.duplicates_deleted)
    )


def reconcile_all(
    provider: CalendarProvider,
    config: BlockerConfig,
    clock: Optional[Callable[[], datetime]] = None,
) -> List[ReconcileReport]:
    """
    Reconcile each configured source calendar in order.

    A failure stops the run; calendars already processed stay reconciled and
    the next scheduled run picks up the rest.
    """
    reconciler = Reconciler(provider, config, clock=clock)
    reports: List[ReconcileReport] = []

    with RUN_DURATION_SECONDS.labels(operation="reconcile").time():
        for calendar_id in config.source_calendar_ids:
            try:
                report = reconciler.reconcile(calendar_id)
            except Exception:
                logger.exception(f"Reconcile failed for source calendar {calendar_id}")
                raise
            _record(report)
            reports.append(report)
            logger.info(
                f"{calendar_id}: created {len(report.created)}, deleted "
                f"{len(report.deleted) + len(report.duplicates_deleted)}, skipped {len(report.rejected)}"
                + (" (dry run)" if report.dry_run else "")
            )

    LAST_SUCCESS_UNIXTIME.labels(operation="reconcile").set_to_current_time()
    return reports


def cleanup_all(
    provider: CalendarProvider,
    config: BlockerConfig,
    clock: Optional[Callable[[], datetime]] = None,
) -> CleanupReport:
    with RUN_DURATION_SECONDS.labels(operation="cleanup").time():
        try:
            report = Cleanup(provider, config, clock=clock).cleanup_all()
        except Exception:
            logger.exception("Cleanup of blocked events failed")
            raise

    if not report.dry_run:
        PLACEHOLDERS_DELETED_TOTAL.labels(source="any", reason="cleanup").inc(len(report.deleted))
    LAST_SUCCESS_UNIXTIME.labels(operation="cleanup").set_to_current_time()
    return report
