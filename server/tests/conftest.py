"""Shared test fixtures."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from hazardwatch.core.geo import EARTH_RADIUS_M
from hazardwatch.core.models import Report, ReportType

# Reference point on the coast (Kochi).
BASE_LAT = 9.9667
BASE_LNG = 76.2417


def north_of(lat: float, lng: float, meters: float) -> tuple[float, float]:
    """Point exactly ``meters`` due north along the meridian."""
    return lat + math.degrees(meters / EARTH_RADIUS_M), lng


@pytest.fixture
def north():
    return north_of


@pytest.fixture
def make_report():
    """Factory for reports placed ``north_m`` meters north of the base point.

    Ids increase from 1; ``created_at`` decreases so file order is newest first.
    """
    ids = count(1)
    start = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    def _make(
        north_m: float = 0.0,
        report_type: ReportType = ReportType.FLOOD,
        *,
        id=None,
        lat: float | None = None,
        lng: float | None = None,
        geofence_radius: float | None = None,
        description: str = "Water over the road",
    ) -> Report:
        n = next(ids)
        if lat is None:
            lat, lng = north_of(BASE_LAT, BASE_LNG, north_m)
        return Report(
            id=n if id is None else id,
            reporter_name=f"reporter-{n}",
            report_type=report_type,
            description=description,
            lat=lat,
            lng=BASE_LNG if lng is None else lng,
            geofence_radius=geofence_radius,
            created_at=start - timedelta(minutes=n),
        )

    return _make
