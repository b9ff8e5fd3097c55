"""Tests for hotspot severity and dominant type."""

from __future__ import annotations

import pytest

from hazardwatch.core.classifier import (
    classify,
    dominant_type,
    severity_for_count,
    type_distribution,
)
from hazardwatch.core.models import ReportType, Severity


@pytest.mark.parametrize("count,expected", [
    (1, Severity.LOW),
    (5, Severity.LOW),
    (6, Severity.MEDIUM),
    (7, Severity.MEDIUM),
    (8, Severity.HIGH),
    (25, Severity.HIGH),
])
def test_severity_boundaries(count, expected):
    assert severity_for_count(count) is expected


def test_distribution_keeps_first_seen_order(make_report):
    reports = [
        make_report(report_type=ReportType.OIL_SPILL),
        make_report(report_type=ReportType.FLOOD),
        make_report(report_type=ReportType.OIL_SPILL),
        make_report(report_type=ReportType.DEAD_FISH),
    ]
    dist = type_distribution(reports)
    assert list(dist) == [ReportType.OIL_SPILL, ReportType.FLOOD, ReportType.DEAD_FISH]
    assert dist == {ReportType.OIL_SPILL: 2, ReportType.FLOOD: 1, ReportType.DEAD_FISH: 1}


def test_dominant_type_is_most_frequent():
    dist = {ReportType.FLOOD: 1, ReportType.HIGH_WAVES: 3, ReportType.OTHER: 2}
    assert dominant_type(dist) is ReportType.HIGH_WAVES


def test_dominant_type_tie_goes_to_first_seen():
    assert dominant_type({ReportType.FLOOD: 2, ReportType.OIL_SPILL: 2}) is ReportType.FLOOD
    assert dominant_type({ReportType.OIL_SPILL: 2, ReportType.FLOOD: 2}) is ReportType.OIL_SPILL


def test_dominant_type_of_empty_distribution():
    with pytest.raises(ValueError):
        dominant_type({})


def test_classify_mixed_cluster(make_report):
    types = [ReportType.MARINE_FIRE, ReportType.ACCIDENT, ReportType.ACCIDENT,
             ReportType.MARINE_FIRE, ReportType.OTHER, ReportType.ACCIDENT]
    profile = classify([make_report(report_type=t) for t in types])
    assert profile.severity is Severity.MEDIUM
    assert profile.dominant_type is ReportType.ACCIDENT
    assert profile.type_distribution[ReportType.MARINE_FIRE] == 2
