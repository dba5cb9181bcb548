from datetime import date, datetime, timedelta, timezone

from sync.days import day_key_of, lookahead_window, ooo_days


def test_same_day_same_key():
    assert day_key_of(datetime(2026, 1, 5, 0, 0)) == day_key_of(datetime(2026, 1, 5, 23, 59))


def test_key_ignores_timezone():
    aware = datetime(2026, 1, 5, 23, 30, tzinfo=timezone(timedelta(hours=-8)))
    assert day_key_of(aware) == date(2026, 1, 5)


def test_keys_unambiguous_across_component_boundaries():
    # 2026-1-11 and 2026-11-1 concatenate to the same digits
    assert day_key_of(datetime(2026, 1, 11)) != day_key_of(datetime(2026, 11, 1))


def test_ooo_days_only_all_day(make_event):
    events = [
        make_event("a", datetime(2026, 1, 6), datetime(2026, 1, 7), all_day=True),
        make_event("b", datetime(2026, 1, 8, 9), datetime(2026, 1, 8, 10)),
    ]
    assert ooo_days(events) == {date(2026, 1, 6)}


def test_ooo_days_multi_day(make_event):
    events = [make_event("a", datetime(2026, 1, 6), datetime(2026, 1, 9), all_day=True)]
    assert ooo_days(events) == {date(2026, 1, 6), date(2026, 1, 7), date(2026, 1, 8)}


def test_lookahead_window(now):
    start, end = lookahead_window(now, 3)
    assert start == now
    assert end - start == timedelta(days=3)
