"""Hotspot classification: type distribution, dominant type and severity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from hazardwatch.core.models import Report, ReportType, Severity

# Cluster sizes at which a hotspot escalates.
HIGH_SEVERITY_COUNT = 8
MEDIUM_SEVERITY_COUNT = 6


@dataclass(frozen=True)
class HotspotProfile:
    type_distribution: dict[ReportType, int]
    dominant_type: ReportType
    severity: Severity


def severity_for_count(report_count: int) -> Severity:
    if report_count >= HIGH_SEVERITY_COUNT:
        return Severity.HIGH
    if report_count >= MEDIUM_SEVERITY_COUNT:
        return Severity.MEDIUM
    return Severity.LOW


def type_distribution(reports: Iterable[Report]) -> dict[ReportType, int]:
    """Count reports per type, keyed in first-seen order."""
    counts: dict[ReportType, int] = {}
    for report in reports:
        counts[report.report_type] = counts.get(report.report_type, 0) + 1
    return counts


def dominant_type(distribution: dict[ReportType, int]) -> ReportType:
    """Most frequent type; on a tie the type seen first wins."""
    if not distribution:
        raise ValueError("cannot pick a dominant type from an empty distribution")
    best_type, best_count = None, -1
    for report_type, count in distribution.items():
        if count > best_count:
            best_type, best_count = report_type, count
    return best_type


def classify(members: list[Report] | tuple[Report, ...]) -> HotspotProfile:
    distribution = type_distribution(members)
    return HotspotProfile(
        type_distribution=distribution,
        dominant_type=dominant_type(distribution),
        severity=severity_for_count(len(members)),
    )
