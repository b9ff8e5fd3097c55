"""HazardWatch: core internal data models.

These are plain dataclasses with no framework dependencies.
Storage rows (dicts) are converted to/from these at the boundary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping


class InvalidReportError(ValueError):
    """A stored report row cannot be turned into a Report."""


class ReportType(str, enum.Enum):
    FLOOD = "Flood"
    OIL_SPILL = "Oil Spill"
    HIGH_WAVES = "High Waves"
    MARINE_FIRE = "Marine Fire"
    ACCIDENT = "Accident"
    DEAD_FISH = "Dead Fish"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> ReportType:
        """Accept the form label ("Oil Spill"), compact ("OilSpill") or member name."""
        if isinstance(value, ReportType):
            return value
        text = str(value or "").strip()
        key = text.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if key in (member.value.replace(" ", "").lower(), member.name.replace("_", "").lower()):
                return member
        return cls.OTHER

    def __str__(self) -> str:
        return self.value


class Severity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __str__(self) -> str:
        return self.value


class NotificationKind(str, enum.Enum):
    HOTSPOT = "hotspot"
    REPORT = "report"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _parse_float(value: Any, name: str, report_id: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidReportError(f"report {report_id!r}: {name}={value!r} is not a number") from None


def _parse_timestamp(value: Any, report_id: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if isinstance(value, str) and value:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise InvalidReportError(f"report {report_id!r}: created_at={value!r} is not a valid time") from None
    return datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class Report:
    """A single geotagged hazard report, as submitted by a citizen."""

    id: Any
    reporter_name: str
    report_type: ReportType
    description: str
    lat: float
    lng: float
    photo_path: str | None = None
    geofence_radius: float | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def location(self) -> Location:
        return Location(self.lat, self.lng)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Report:
        """Build a Report from a storage row.

        Accepts the snake_case column names of the reports table as well as
        camelCase keys. lat/lng may be strings (numeric columns often arrive
        that way) but must parse as numbers.
        """
        report_id = record.get("id")
        lat = _pick(record, "lat", "latitude")
        lng = _pick(record, "lng", "lon", "longitude")
        if lat is None or lng is None:
            raise InvalidReportError(f"report {report_id!r}: missing coordinates")

        radius = _pick(record, "geofence_radius", "geofenceRadius")
        geofence_radius = None if radius is None else _parse_float(radius, "geofence_radius", report_id)

        return cls(
            id=report_id,
            reporter_name=str(_pick(record, "reporter_name", "reporterName", default="")),
            report_type=ReportType.parse(_pick(record, "report_type", "reportType")),
            description=str(_pick(record, "description", default="")),
            lat=_parse_float(lat, "lat", report_id),
            lng=_parse_float(lng, "lng", report_id),
            photo_path=_pick(record, "photo_path", "photoPath"),
            geofence_radius=geofence_radius,
            created_at=_parse_timestamp(_pick(record, "created_at", "createdAt"), report_id),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "reporter_name": self.reporter_name,
            "report_type": self.report_type.value,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "photo_path": self.photo_path,
            "geofence_radius": self.geofence_radius,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Hotspot:
    """A committed cluster of reports, treated as a single alert zone."""

    id: str
    center_lat: float
    center_lng: float
    member_reports: tuple[Report, ...]
    dominant_type: ReportType
    type_distribution: Mapping[ReportType, int]
    radius: float
    severity: Severity
    created_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_distribution", MappingProxyType(dict(self.type_distribution)))

    @property
    def report_count(self) -> int:
        return len(self.member_reports)

    @property
    def center(self) -> Location:
        return Location(self.center_lat, self.center_lng)

    def to_geojson_feature(self) -> dict:
        return {
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [round(self.center_lng, 6), round(self.center_lat, 6)],
            },
            "properties": {
                "kind": "hotspot",
                "id": self.id,
                "report_count": self.report_count,
                "dominant_type": self.dominant_type.value,
                "type_distribution": {t.value: n for t, n in self.type_distribution.items()},
                "severity": self.severity.value,
                "radius_m": self.radius,
                "report_ids": [r.id for r in self.member_reports],
                "created_at": self.created_at.isoformat(),
            },
        }


@dataclass(frozen=True)
class ClusterResult:
    hotspots: tuple[Hotspot, ...] = ()
    unclustered_reports: tuple[Report, ...] = ()

    @property
    def report_count(self) -> int:
        return len(self.unclustered_reports) + sum(h.report_count for h in self.hotspots)


@dataclass(frozen=True)
class Notification:
    id: str
    kind: NotificationKind
    title: str
    message: str
    severity: Severity
    distance_m: int
    related_hotspot_id: str | None = None
    related_report_id: Any = None
    report_count: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
            "severity": self.severity.value,
            "distance_m": self.distance_m,
            "related_hotspot_id": self.related_hotspot_id,
            "related_report_id": self.related_report_id,
            "report_count": self.report_count,
        }
