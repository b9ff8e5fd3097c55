#!/usr/bin/env python3
"""HazardWatch report simulator.

Generates a synthetic reports file for trying out clustering and geofencing:
a few dense hazard sites (which become hotspots) plus scattered background
reports, some of them with their own geofence radius.

Usage:
    # 3 hazard sites off Mumbai, 40 background reports
    python -m tools.simulator.simulate --out data/reports.jsonl --sites 3 --background 40

    # Reproducible output around a specific location
    python -m tools.simulator.simulate --out data/reports.jsonl --center 13.08,80.29 --seed 7
"""

from __future__ import annotations

import argparse
import json
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from hazardwatch.core.models import Report, ReportType

_DESCRIPTIONS = {
    ReportType.FLOOD: ["Water over the promenade", "Street flooded near the jetty"],
    ReportType.OIL_SPILL: ["Oil sheen along the shore", "Black residue on rocks"],
    ReportType.HIGH_WAVES: ["Waves breaking over the sea wall", "Rough surf, boats pulled in"],
    ReportType.MARINE_FIRE: ["Smoke from a fishing boat", "Fire on a moored vessel"],
    ReportType.ACCIDENT: ["Boat capsized near the harbour", "Collision at the pier"],
    ReportType.DEAD_FISH: ["Dead fish washed ashore", "Fish kill in the estuary"],
    ReportType.OTHER: ["Debris floating offshore", "Unusual foam on the water"],
}


@dataclass
class HazardSite:
    lat: float
    lng: float
    report_type: ReportType
    reports: int


def offset(lat: float, lng: float, distance_m: float, bearing_deg: float) -> tuple[float, float]:
    """Move a point by distance_m along bearing_deg (flat-earth approximation)."""
    bearing_rad = math.radians(bearing_deg)
    # Approximate: 1 degree latitude ≈ 111,000 m
    dlat = (distance_m * math.cos(bearing_rad)) / 111_000
    dlng = (distance_m * math.sin(bearing_rad)) / (111_000 * math.cos(math.radians(lat)))
    return lat + dlat, lng + dlng


def make_report(rng: random.Random, lat: float, lng: float, report_type: ReportType,
                created_at: datetime, geofence_radius: float | None = None) -> Report:
    return Report(
        id=None,
        reporter_name=rng.choice(["Asha", "Ravi", "Meera", "Joseph", "Fatima", "Kiran"]),
        report_type=report_type,
        description=rng.choice(_DESCRIPTIONS[report_type]),
        lat=round(lat, 6),
        lng=round(lng, 6),
        geofence_radius=geofence_radius,
        created_at=created_at,
    )


def generate(args: argparse.Namespace) -> list[Report]:
    rng = random.Random(args.seed)
    center_lat, center_lng = args.center
    now = datetime.now(timezone.utc)
    reports: list[Report] = []

    sites = []
    for _ in range(args.sites):
        lat, lng = offset(center_lat, center_lng,
                          rng.uniform(0, args.radius_km * 1000), rng.uniform(0, 360))
        sites.append(HazardSite(lat, lng, rng.choice(list(ReportType)), rng.randint(5, 10)))

    for site in sites:
        for _ in range(site.reports):
            lat, lng = offset(site.lat, site.lng, rng.uniform(0, 300), rng.uniform(0, 360))
            # Mostly the site's own hazard, with some mixed-in sightings.
            report_type = site.report_type if rng.random() < 0.75 else rng.choice(list(ReportType))
            created = now - timedelta(minutes=rng.randint(0, 24 * 60))
            reports.append(make_report(rng, lat, lng, report_type, created))

    for _ in range(args.background):
        lat, lng = offset(center_lat, center_lng,
                          rng.uniform(0, args.radius_km * 1000), rng.uniform(0, 360))
        radius = rng.choice([None, None, 200.0, 500.0])
        created = now - timedelta(minutes=rng.randint(0, 7 * 24 * 60))
        reports.append(make_report(rng, lat, lng, rng.choice(list(ReportType)), created, radius))

    return reports


def main():
    parser = argparse.ArgumentParser(description="HazardWatch report simulator")
    parser.add_argument("--out", type=Path, default=Path("data/reports.jsonl"),
                        help="Reports JSON Lines file to write")
    parser.add_argument("--sites", type=int, default=3, help="Number of dense hazard sites")
    parser.add_argument("--background", type=int, default=40, help="Number of scattered reports")
    parser.add_argument("--center", type=str, default="19.0760,72.8777",
                        help="Center lat,lng (default: Mumbai)")
    parser.add_argument("--radius-km", type=float, default=10.0, help="Scatter radius in km")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()

    # Parse center
    lat, lng = args.center.split(",")
    args.center = (float(lat), float(lng))

    reports = generate(args)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        for i, report in enumerate(reports, start=1):
            row = report.to_record() | {"id": i}
            f.write(json.dumps(row, separators=(",", ":")) + "\n")

    print(f"Wrote {len(reports)} reports to {args.out}")
    print(f"  Center: {args.center[0]:.4f}, {args.center[1]:.4f}")
    print(f"  Hazard sites: {args.sites}")
    print(f"  Background reports: {args.background}")


if __name__ == "__main__":
    main()
