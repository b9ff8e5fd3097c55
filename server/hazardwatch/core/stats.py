"""Engine statistics.

In-memory counters for clustering runs and geofence checks.
No framework dependencies.
"""

from __future__ import annotations

import threading
import time


class EngineStats:
    """Thread-safe counters shared by the engine and the monitor.

    ``hotspots_last_run`` and ``unclustered_last_run`` describe the most
    recent clustering pass only; everything else accumulates.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = time.time()

        # Counters
        self.cluster_runs: int = 0
        self.reports_seen: int = 0
        self.reports_rejected: int = 0
        self.hotspots_last_run: int = 0
        self.unclustered_last_run: int = 0
        self.geofence_checks: int = 0
        self.notifications_emitted: int = 0
        self.notifications_delivered: int = 0
        self.monitor_errors: int = 0
        self.last_cluster_ms: float = 0.0

    def record_cluster_run(self, reports: int, hotspots: int, unclustered: int,
                           elapsed_ms: float) -> None:
        with self._lock:
            self.cluster_runs += 1
            self.reports_seen += reports
            self.hotspots_last_run = hotspots
            self.unclustered_last_run = unclustered
            self.last_cluster_ms = elapsed_ms

    def record_rejected(self, count: int = 1) -> None:
        with self._lock:
            self.reports_rejected += count

    def record_geofence_check(self, emitted: int) -> None:
        with self._lock:
            self.geofence_checks += 1
            self.notifications_emitted += emitted

    def record_delivered(self, count: int) -> None:
        with self._lock:
            self.notifications_delivered += count

    def record_monitor_error(self) -> None:
        with self._lock:
            self.monitor_errors += 1

    def snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of all stats."""
        with self._lock:
            return {
                "uptime_seconds": round(time.time() - self._started_at, 1),
                "cluster_runs": self.cluster_runs,
                "reports_seen": self.reports_seen,
                "reports_rejected": self.reports_rejected,
                "hotspots": self.hotspots_last_run,
                "unclustered_reports": self.unclustered_last_run,
                "last_cluster_ms": round(self.last_cluster_ms, 2),
                "geofence_checks": self.geofence_checks,
                "notifications_emitted": self.notifications_emitted,
                "notifications_delivered": self.notifications_delivered,
                "monitor_errors": self.monitor_errors,
            }
