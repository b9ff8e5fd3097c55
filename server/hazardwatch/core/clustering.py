"""Hotspot clustering: groups nearby reports into hotspots.

Uses a greedy, seed-based approach: walk the reports in input order; each
report not yet claimed seeds a candidate cluster made of every other
unclaimed report within the cluster radius *of the seed* (not of a running
centroid). Candidates with at least ``min_reports`` members are committed;
smaller ones are dropped and their seed stays available to later seeds.

The partition depends on input order. Callers that need stable output must
pin the order (the report store returns newest first).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from hazardwatch.core.classifier import classify
from hazardwatch.core.geo import haversine_m
from hazardwatch.core.models import ClusterResult, Hotspot, Report

# Minimum number of reports for a cluster to become a hotspot.
MIN_REPORTS = 5

# Maximum distance (meters) from a seed report for another report to join it.
CLUSTER_RADIUS_M = 1000.0

# Geofence radius (meters) around a hotspot center.
HOTSPOT_GEOFENCE_RADIUS_M = 500.0


def _make_hotspot(
    seed: Report,
    members: list[Report],
    geofence_radius_m: float,
    created_at: datetime,
) -> Hotspot:
    # Plain mean of degrees, not a spherical centroid.
    center_lat = sum(r.lat for r in members) / len(members)
    center_lng = sum(r.lng for r in members) / len(members)
    profile = classify(members)
    return Hotspot(
        id=f"hotspot-{seed.id}",
        center_lat=center_lat,
        center_lng=center_lng,
        member_reports=tuple(members),
        dominant_type=profile.dominant_type,
        type_distribution=profile.type_distribution,
        radius=geofence_radius_m,
        severity=profile.severity,
        created_at=created_at,
    )


def build_clusters(
    reports: Sequence[Report],
    cluster_radius_m: float = CLUSTER_RADIUS_M,
    min_reports: int = MIN_REPORTS,
    geofence_radius_m: float = HOTSPOT_GEOFENCE_RADIUS_M,
    now: datetime | None = None,
) -> ClusterResult:
    """Partition ``reports`` into hotspots and unclustered reports.

    Every input report ends up in exactly one hotspot or in
    ``unclustered_reports``; unclustered reports keep their input order.
    """
    created_at = now or datetime.now(timezone.utc)
    used: set[int] = set()
    hotspots: list[Hotspot] = []

    for i, seed in enumerate(reports):
        if i in used:
            continue

        member_indices = [i]
        for j, other in enumerate(reports):
            if j == i or j in used:
                continue
            d = haversine_m(seed.lat, seed.lng, other.lat, other.lng)
            if d <= cluster_radius_m:
                member_indices.append(j)

        if len(member_indices) < min_reports:
            continue

        used.update(member_indices)
        members = [reports[j] for j in member_indices]
        hotspots.append(_make_hotspot(seed, members, geofence_radius_m, created_at))

    unclustered = tuple(r for i, r in enumerate(reports) if i not in used)
    return ClusterResult(hotspots=tuple(hotspots), unclustered_reports=unclustered)


def clusters_to_geojson(result: ClusterResult) -> dict:
    """Convert a ClusterResult to a GeoJSON FeatureCollection.

    Hotspots come first, then the unclustered reports as individual points.
    """
    features = [h.to_geojson_feature() for h in result.hotspots]
    for report in result.unclustered_reports:
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [round(report.lng, 6), round(report.lat, 6)],
            },
            "properties": {
                "kind": "report",
                "id": report.id,
                "report_type": report.report_type.value,
                "description": report.description,
                "geofence_radius_m": report.geofence_radius,
                "created_at": report.created_at.isoformat(),
            },
        })
    return {"type": "FeatureCollection", "features": features}
