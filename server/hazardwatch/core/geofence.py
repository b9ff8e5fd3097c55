"""Geofence evaluation: turns a position into proximity notifications.

A hotspot alerts when the position is within its radius of the hotspot
center. An unclustered report alerts only if it carries its own
``geofence_radius``; reports without one never alert individually.

The evaluator is stateless. Use :func:`new_notifications` to keep only the
alerts that were not surfaced on the previous check.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

import structlog

from hazardwatch.core.geo import haversine_m
from hazardwatch.core.models import (
    Hotspot,
    Location,
    Notification,
    NotificationKind,
    Report,
    Severity,
)

log = structlog.get_logger()


class NotificationSink(Protocol):
    """Port: surfaces notifications to the user (banner, OS alert, ...)."""

    def deliver(self, notification: Notification) -> None: ...


class LogNotificationSink:
    """NotificationSink that writes each notification to the log."""

    def deliver(self, notification: Notification) -> None:
        log.info("notification_delivered",
                 id=notification.id,
                 kind=notification.kind.value,
                 severity=notification.severity.value,
                 distance_m=notification.distance_m,
                 title=notification.title)


class CollectingSink:
    """NotificationSink that keeps delivered notifications in memory."""

    def __init__(self) -> None:
        self.delivered: list[Notification] = []

    def deliver(self, notification: Notification) -> None:
        self.delivered.append(notification)


def hotspot_notification(hotspot: Hotspot, distance_m: float) -> Notification:
    return Notification(
        id=f"hotspot-{hotspot.id}",
        kind=NotificationKind.HOTSPOT,
        title=f"Entering {hotspot.severity.value.upper()} Priority Zone",
        message=f"{hotspot.report_count} {hotspot.dominant_type.value} reports in this area",
        severity=hotspot.severity,
        distance_m=round(distance_m),
        related_hotspot_id=hotspot.id,
        report_count=hotspot.report_count,
    )


def report_notification(report: Report, distance_m: float) -> Notification:
    return Notification(
        id=f"report-{report.id}",
        kind=NotificationKind.REPORT,
        title="Near reported issue",
        message=f"{report.report_type.value}: {report.description}",
        severity=Severity.LOW,
        distance_m=round(distance_m),
        related_report_id=report.id,
    )


def check_geofences(
    location: Location,
    hotspots: Sequence[Hotspot],
    unclustered_reports: Sequence[Report],
) -> list[Notification]:
    """Return the notifications triggered at ``location``.

    Hotspot notifications come first, then report notifications, each group
    in input order.
    """
    notifications: list[Notification] = []

    for hotspot in hotspots:
        d = haversine_m(location.lat, location.lng, hotspot.center_lat, hotspot.center_lng)
        if d <= hotspot.radius:
            notifications.append(hotspot_notification(hotspot, d))

    for report in unclustered_reports:
        if not report.geofence_radius:
            continue
        d = haversine_m(location.lat, location.lng, report.lat, report.lng)
        if d <= report.geofence_radius:
            notifications.append(report_notification(report, d))

    return notifications


def new_notifications(
    previous_ids: Iterable[str],
    current: Sequence[Notification],
) -> list[Notification]:
    """Notifications in ``current`` whose ids were not already shown."""
    seen = set(previous_ids)
    return [n for n in current if n.id not in seen]


def deliver_all(sink: NotificationSink, notifications: Iterable[Notification]) -> int:
    """Hand notifications to the sink. Returns how many were delivered."""
    delivered = 0
    for notification in notifications:
        try:
            sink.deliver(notification)
            delivered += 1
        except Exception:
            log.error("notification_delivery_failed", id=notification.id, exc_info=True)
    return delivered
