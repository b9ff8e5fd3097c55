"""Hotspot monitor: keeps clusters fresh and alerts on location updates.

Clustering is O(n^2) in the report count, so the monitor recomputes it at
most once per poll interval and checks every location update against the
cached result. Only notifications that were not active on the previous
check are delivered to the sink.

It depends on the ReportSource, LocationQueue and NotificationSink
protocols, not concrete implementations.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Callable

import structlog

from hazardwatch.core.geofence import deliver_all, new_notifications
from hazardwatch.core.models import ClusterResult

if TYPE_CHECKING:
    from hazardwatch.core.engine import HotspotEngine
    from hazardwatch.core.geofence import NotificationSink
    from hazardwatch.core.models import Location, Notification
    from hazardwatch.core.stats import EngineStats
    from hazardwatch.queue.base import LocationQueue
    from hazardwatch.storage.base import ReportSource

log = structlog.get_logger()


class HotspotMonitor:
    """Caller-side driver around a HotspotEngine."""

    def __init__(
        self,
        engine: HotspotEngine,
        source: ReportSource,
        queue: LocationQueue,
        sink: NotificationSink,
        stats: EngineStats,
        poll_interval_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._engine = engine
        self._source = source
        self._queue = queue
        self._sink = sink
        self._stats = stats
        self._poll_interval = poll_interval_seconds
        self._clock = clock
        self._result = ClusterResult()
        self._last_refresh: float | None = None
        self._active_ids: set[str] = set()

    @property
    def result(self) -> ClusterResult:
        return self._result

    @property
    def active_notification_ids(self) -> frozenset[str]:
        return frozenset(self._active_ids)

    def refresh(self, *, force: bool = False) -> bool:
        """Re-read reports and recluster, unless done within the poll interval.

        Returns True if clusters were recomputed.
        """
        now = self._clock()
        if (
            not force
            and self._last_refresh is not None
            and now - self._last_refresh < self._poll_interval
        ):
            return False

        reports = self._source.read_reports()
        self._result = self._engine.cluster(reports)
        self._last_refresh = now
        return True

    def handle_location(self, location: Location) -> list[Notification]:
        """Check a location and deliver notifications not shown last time.

        Returns the newly delivered notifications.
        """
        current = self._engine.check(location, self._result)
        fresh = new_notifications(self._active_ids, current)
        self._active_ids = {n.id for n in current}

        delivered = deliver_all(self._sink, fresh)
        self._stats.record_delivered(delivered)
        if fresh:
            log.info("geofence_alerts", new=len(fresh), active=len(current),
                     lat=round(location.lat, 5), lng=round(location.lng, 5))
        return fresh

    async def run(self) -> None:
        """Consume location updates. Runs as a background task."""
        log.info("monitor_started", poll_interval=self._poll_interval)
        while True:
            location = await self._queue.get()
            try:
                self.refresh()
                self.handle_location(location)
            except Exception:
                log.error("location_update_failed", exc_info=True)
                self._stats.record_monitor_error()

    async def run_polling(self) -> None:
        """Recompute clusters every poll interval. Runs as a background task."""
        while True:
            try:
                self.refresh()
            except Exception:
                log.error("report_refresh_failed", exc_info=True)
                self._stats.record_monitor_error()
            await asyncio.sleep(self._poll_interval)
