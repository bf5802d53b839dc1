"""Tests for the attention tracker."""

from unittest.mock import MagicMock

import pytest

from lockin.exceptions import StoreWriteError
from lockin.store import keys
from lockin.tracking.models import day_key
from lockin.tracking.tracker import AttentionTracker, tracked_hostname


def _usage(store, clock):
    return store.get(keys.SITE_USAGE, {}).get(day_key(clock()), {})


def test_tracked_hostname():
    assert tracked_hostname("https://www.Example.com/page?q=1") == "www.example.com"
    assert tracked_hostname("http://news.site:8080/") == "news.site"
    assert tracked_hostname("chrome://extensions") is None
    assert tracked_hostname("file:///tmp/x.html") is None
    assert tracked_hostname("") is None
    assert tracked_hostname(None) is None


def test_focus_change_attributes_previous(store, clock):
    tracker = AttentionTracker(store, clock=clock)
    tracker.on_focus_change("https://a.com/x")
    clock.advance(30)
    tracker.on_focus_change("https://b.com/")
    clock.advance(12)
    tracker.on_focus_lost()

    assert _usage(store, clock) == {"a.com": 30, "b.com": 12}
    assert tracker.cursor.hostname is None
    assert tracker.cursor.started_at is None


def test_non_http_destination_leaves_cursor_empty(store, clock):
    tracker = AttentionTracker(store, clock=clock)
    tracker.on_focus_change("https://a.com/")
    clock.advance(5)
    assert tracker.on_focus_change("about:blank") is None
    assert not tracker.cursor.active
    clock.advance(100)
    tracker.on_focus_lost()
    assert _usage(store, clock) == {"a.com": 5}


def test_accumulates_within_day(store, clock):
    tracker = AttentionTracker(store, clock=clock)
    for _ in range(3):
        tracker.on_focus_change("https://a.com/")
        clock.advance(20)
        tracker.on_focus_lost()
    assert _usage(store, clock) == {"a.com": 60}


@pytest.mark.parametrize("elapsed", [0, -50, 7200, 9000])
def test_out_of_range_interval_discarded(store, clock, elapsed):
    tracker = AttentionTracker(store, clock=clock)
    tracker.on_focus_change("https://a.com/")
    clock.advance(elapsed)
    assert tracker.record_elapsed() == 0
    assert store.get(keys.SITE_USAGE) is None
    assert not tracker.cursor.active


def test_just_under_limit_recorded(store, clock):
    tracker = AttentionTracker(store, clock=clock)
    tracker.on_focus_change("https://a.com/")
    clock.advance(7199)
    assert tracker.record_elapsed() == 7199


def test_sub_second_interval_not_recorded(store, clock):
    tracker = AttentionTracker(store, clock=clock)
    tracker.on_focus_change("https://a.com/")
    clock.advance(0.4)
    assert tracker.record_elapsed() == 0
    assert store.get(keys.SITE_USAGE) is None


def test_tick_reflushes_at_cadence(store, clock):
    tracker = AttentionTracker(store, clock=clock, cadence_seconds=10)
    tracker.on_focus_change("https://a.com/")
    clock.advance(4)
    assert tracker.on_tick() is False
    clock.advance(6)
    assert tracker.on_tick() is True
    assert _usage(store, clock) == {"a.com": 10}
    assert tracker.cursor.hostname == "a.com"
    assert tracker.cursor.started_at == clock()

    clock.advance(3)
    tracker.on_focus_lost()
    assert _usage(store, clock) == {"a.com": 13}


def test_tick_without_cursor(store, clock):
    assert AttentionTracker(store, clock=clock).on_tick() is False


def test_recorded_never_exceeds_wall_clock(store, clock):
    tracker = AttentionTracker(store, clock=clock)
    start = clock()
    steps = [("https://a.com/", 3.7), ("https://b.com/", 11.2), ("https://a.com/", 0.9),
             ("ftp://x/", 40), ("https://c.com/", 25.5)]
    for url, dt in steps:
        tracker.on_focus_change(url)
        clock.advance(dt)
        tracker.on_tick()
    tracker.on_focus_lost()
    assert sum(_usage(store, clock).values()) <= clock() - start


def test_cursor_cleared_when_store_fails(clock):
    store = MagicMock()
    store.get.return_value = {}
    store.set.side_effect = StoreWriteError("disk full")
    tracker = AttentionTracker(store, clock=clock)
    tracker.on_focus_change("https://a.com/")
    clock.advance(5)
    with pytest.raises(StoreWriteError):
        tracker.record_elapsed()
    assert not tracker.cursor.active
