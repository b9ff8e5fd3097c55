"""Tests for EngineStats counters."""

from __future__ import annotations

import threading

from hazardwatch.core.stats import EngineStats


def test_initial_stats():
    snap = EngineStats().snapshot()
    assert snap["cluster_runs"] == 0
    assert snap["hotspots"] == 0
    assert snap["notifications_emitted"] == 0
    assert snap["uptime_seconds"] >= 0


def test_cluster_runs_keep_last_counts():
    stats = EngineStats()
    stats.record_cluster_run(reports=20, hotspots=2, unclustered=8, elapsed_ms=1.5)
    stats.record_cluster_run(reports=25, hotspots=3, unclustered=4, elapsed_ms=2.25)

    snap = stats.snapshot()
    assert snap["cluster_runs"] == 2
    assert snap["reports_seen"] == 45
    assert snap["hotspots"] == 3
    assert snap["unclustered_reports"] == 4
    assert snap["last_cluster_ms"] == 2.25


def test_notification_counters():
    stats = EngineStats()
    stats.record_geofence_check(emitted=2)
    stats.record_geofence_check(emitted=0)
    stats.record_delivered(1)
    stats.record_rejected(3)
    stats.record_monitor_error()

    snap = stats.snapshot()
    assert snap["geofence_checks"] == 2
    assert snap["notifications_emitted"] == 2
    assert snap["notifications_delivered"] == 1
    assert snap["reports_rejected"] == 3
    assert snap["monitor_errors"] == 1


def test_concurrent_updates():
    stats = EngineStats()

    def worker():
        for _ in range(1000):
            stats.record_geofence_check(emitted=1)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert stats.snapshot()["notifications_emitted"] == 4000
