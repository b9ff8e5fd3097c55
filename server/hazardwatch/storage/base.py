"""Storage interface (port) for reading hazard reports."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from hazardwatch.core.models import Report


class ReportSource(Protocol):
    """Port: supplies the current, ordered set of reports."""

    def read_reports(self) -> list[Report]: ...
