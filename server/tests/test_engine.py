"""Tests for the HotspotEngine facade."""

from __future__ import annotations

import pytest

from hazardwatch.config import ConfigError, HotspotConfig
from hazardwatch.core.engine import HotspotEngine
from hazardwatch.core.geo import InvalidCoordinateError
from hazardwatch.core.models import Location, NotificationKind
from hazardwatch.core.stats import EngineStats


@pytest.fixture
def stats():
    return EngineStats()


@pytest.fixture
def engine(stats):
    return HotspotEngine(HotspotConfig(), stats)


def test_cluster_records_stats(engine, stats, make_report):
    reports = [make_report(north_m=i * 10) for i in range(6)]
    reports.append(make_report(north_m=5000))

    result = engine.cluster(reports)

    assert len(result.hotspots) == 1
    snap = stats.snapshot()
    assert snap["cluster_runs"] == 1
    assert snap["reports_seen"] == 7
    assert snap["hotspots"] == 1
    assert snap["unclustered_reports"] == 1
    assert snap["reports_rejected"] == 0


def test_invalid_reports_are_rejected_not_clustered(engine, stats, make_report):
    reports = [make_report(north_m=i * 10) for i in range(5)]
    reports.append(make_report(lat=float("nan"), lng=76.0))
    reports.append(make_report(lat=123.0, lng=76.0))

    result = engine.cluster(reports)

    assert result.report_count == 5
    assert result.unclustered_reports == ()
    assert stats.snapshot()["reports_rejected"] == 2


def test_config_is_applied(stats, make_report):
    engine = HotspotEngine(HotspotConfig(min_reports=2, cluster_radius_m=100,
                                         geofence_radius_m=50), stats)
    reports = [make_report(north_m=0), make_report(north_m=90), make_report(north_m=500)]

    result = engine.cluster(reports)

    assert [h.report_count for h in result.hotspots] == [2]
    assert result.hotspots[0].radius == 50


def test_invalid_config_rejected(stats):
    with pytest.raises(ConfigError):
        HotspotEngine(HotspotConfig(min_reports=0), stats)


def test_check_rejects_bad_location(engine, make_report):
    result = engine.cluster([make_report(north_m=i) for i in range(5)])
    with pytest.raises(InvalidCoordinateError):
        engine.check(Location(float("nan"), 0.0), result)
    with pytest.raises(InvalidCoordinateError):
        engine.check(Location(0.0, 200.0), result)


def test_evaluate(engine, stats, make_report):
    reports = [make_report(north_m=i * 10) for i in range(5)]
    reports.append(make_report(north_m=3000, geofence_radius=300))

    result, notes = engine.evaluate(reports, reports[-1].location)

    assert len(result.hotspots) == 1
    assert [n.kind for n in notes] == [NotificationKind.REPORT]
    snap = stats.snapshot()
    assert snap["geofence_checks"] == 1
    assert snap["notifications_emitted"] == 1


def test_evaluate_validates_location_first(engine, stats, make_report):
    with pytest.raises(InvalidCoordinateError):
        engine.evaluate([make_report()], Location(95.0, 0.0))
    assert stats.snapshot()["cluster_runs"] == 0
