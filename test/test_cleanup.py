from datetime import datetime

from conftest import PERSONAL, PRIMARY, WORK
from sync.cleanup import Cleanup
from sync.reconciler import Reconciler
from sync.tags import tag_for, tags_for


def _tagged(provider, tags):
    return [e for e in provider.events(PRIMARY) if not tags.isdisjoint(e.tag_keys())]


def test_cleanup_removes_every_placeholder(provider, make_config, make_event, clock):
    config = make_config(source_calendar_ids=[WORK, PERSONAL])
    provider.add(WORK, make_event("w1", datetime(2026, 1, 5, 10), datetime(2026, 1, 5, 11)))
    provider.add(PERSONAL, make_event("p1", datetime(2026, 1, 6, 10), datetime(2026, 1, 6, 11)))
    provider.add(PRIMARY, make_event("mine", datetime(2026, 1, 7, 12), datetime(2026, 1, 7, 13)))
    reconciler = Reconciler(provider, config, clock=clock)
    reconciler.reconcile(WORK)
    reconciler.reconcile(PERSONAL)
    # orphan pointing at an event that never existed
    provider.add(
        PRIMARY,
        make_event("orphan", datetime(2026, 1, 7, 9), datetime(2026, 1, 7, 10), tags={tag_for(WORK): "x"}),
    )

    report = Cleanup(provider, config, clock=clock).cleanup_all()

    assert len(report.deleted) == 3
    assert _tagged(provider, tags_for(config.source_calendar_ids)) == []
    assert [e.event_id for e in provider.events(PRIMARY)] == ["mine"]


def test_cleanup_for_removed_calendar(provider, make_config, make_event, clock):
    provider.add(
        PRIMARY,
        make_event("old", datetime(2026, 1, 7, 9), datetime(2026, 1, 7, 10), tags={tag_for("old@example.com"): "x"}),
    )
    config = make_config()

    report = Cleanup(provider, config, clock=clock).cleanup_all(["old@example.com"])

    assert report.deleted == ["old"]
    assert report.tags == {tag_for("old@example.com")}


def test_cleanup_dry_run(provider, make_config, make_event, clock):
    provider.add(
        PRIMARY,
        make_event("p", datetime(2026, 1, 7, 9), datetime(2026, 1, 7, 10), tags={tag_for(WORK): "x"}),
    )

    report = Cleanup(provider, make_config(dry_run=True), clock=clock).cleanup_all()

    assert report.deleted == ["p"]
    assert provider.calls == []
    assert len(provider.events(PRIMARY)) == 1
