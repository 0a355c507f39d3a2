"""Tests for ServiceStats."""

from __future__ import annotations

from voicelogger.core.stats import ServiceStats


def test_initial_stats():
    stats = ServiceStats()
    snap = stats.snapshot()
    assert snap["sessions_started"] == 0
    assert snap["recordings_saved"] == 0
    assert snap["roads"] == {"requests": 0, "successes": 0, "failures": {}, "fallbacks": 0}
    assert snap["active_session"] is None


def test_active_session_tracking():
    stats = ServiceStats()
    stats.record_session_started(location_granted=True)
    stats.record_sample()
    stats.record_sample()

    snap = stats.snapshot()
    assert snap["sessions_started"] == 1
    assert snap["samples_received"] == 2
    assert snap["active_session"]["samples"] == 2
    assert snap["active_session"]["location_granted"] is True

    stats.record_session_ended()
    assert stats.snapshot()["active_session"] is None


def test_cancelled_session_counted():
    stats = ServiceStats()
    stats.record_session_started(location_granted=False)
    stats.record_session_ended(cancelled=True)

    snap = stats.snapshot()
    assert snap["sessions_cancelled"] == 1
    assert snap["active_session"] is None


def test_roads_failures_by_reason():
    stats = ServiceStats()
    for reason in ("Timeout", "Timeout", "API Key Limited."):
        stats.record_roads_request()
        stats.record_roads_failure(reason)
        stats.record_fallback()
    stats.record_roads_request()
    stats.record_roads_success()

    roads = stats.snapshot()["roads"]
    assert roads["requests"] == 4
    assert roads["successes"] == 1
    assert roads["failures"] == {"Timeout": 2, "API Key Limited.": 1}
    assert roads["fallbacks"] == 3


def test_library_counters():
    stats = ServiceStats()
    stats.record_saved(10)
    stats.record_deleted(4)
    stats.record_save_error()
    stats.record_sample_rejected(2)

    snap = stats.snapshot()
    assert snap["recordings_saved"] == 10
    assert snap["recordings_deleted"] == 4
    assert snap["save_errors"] == 1
    assert snap["samples_rejected"] == 2
