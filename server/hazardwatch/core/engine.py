"""Hotspot engine: validates inputs, clusters reports, checks geofences.

This is the core business logic facade. It only returns data; delivering
notifications is left to a NotificationSink owned by the caller.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Iterable

import structlog

from hazardwatch.core.clustering import build_clusters
from hazardwatch.core.geo import is_valid_coordinate, validate_coordinates
from hazardwatch.core.geofence import check_geofences

if TYPE_CHECKING:
    from hazardwatch.config import HotspotConfig
    from hazardwatch.core.models import ClusterResult, Location, Notification, Report
    from hazardwatch.core.stats import EngineStats

log = structlog.get_logger()


class HotspotEngine:
    """Runs clustering and geofencing with a fixed configuration."""

    def __init__(self, config: HotspotConfig, stats: EngineStats) -> None:
        config.validate()
        self._config = config
        self._stats = stats

    @property
    def config(self) -> HotspotConfig:
        return self._config

    def accept_reports(self, reports: Iterable[Report]) -> list[Report]:
        """Drop reports whose coordinates are unusable, keeping input order."""
        accepted: list[Report] = []
        rejected = 0
        for report in reports:
            if is_valid_coordinate(report.lat, report.lng):
                accepted.append(report)
            else:
                rejected += 1
                log.warning("report_rejected", report_id=report.id,
                            lat=report.lat, lng=report.lng)
        if rejected:
            self._stats.record_rejected(rejected)
        return accepted

    def cluster(self, reports: Iterable[Report]) -> ClusterResult:
        accepted = self.accept_reports(reports)
        started = time.perf_counter()
        result = build_clusters(
            accepted,
            cluster_radius_m=self._config.cluster_radius_m,
            min_reports=self._config.min_reports,
            geofence_radius_m=self._config.geofence_radius_m,
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        self._stats.record_cluster_run(
            reports=len(accepted),
            hotspots=len(result.hotspots),
            unclustered=len(result.unclustered_reports),
            elapsed_ms=elapsed_ms,
        )
        log.info("clusters_built",
                 reports=len(accepted),
                 hotspots=len(result.hotspots),
                 unclustered=len(result.unclustered_reports),
                 elapsed_ms=round(elapsed_ms, 2))
        return result

    def check(self, location: Location, result: ClusterResult) -> list[Notification]:
        """Geofence check against an existing ClusterResult.

        Raises InvalidCoordinateError for an unusable location.
        """
        validate_coordinates(location.lat, location.lng)
        notifications = check_geofences(location, result.hotspots, result.unclustered_reports)
        self._stats.record_geofence_check(len(notifications))
        for n in notifications:
            log.debug("geofence_triggered", id=n.id, kind=n.kind.value,
                      distance_m=n.distance_m)
        return notifications

    def evaluate(self, reports: Iterable[Report], location: Location) -> tuple[ClusterResult, list[Notification]]:
        validate_coordinates(location.lat, location.lng)
        result = self.cluster(reports)
        return result, self.check(location, result)
