"""File-based report storage.

Stores reports as JSON Lines, one report row per line, using the column
names of the reports table (snake_case). Reads return the newest report
first, the order the map client receives them in.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import structlog

from hazardwatch.core.models import Report, ReportType

log = structlog.get_logger()


class FileReportStorage:
    """ReportSource backed by a single JSON Lines file on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def _read_rows(self) -> list[dict]:
        if not self._path.exists():
            return []
        rows = []
        with open(self._path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    row = json.loads(line)
                except json.JSONDecodeError:
                    log.warning("report_line_unreadable", path=str(self._path), line=line_no)
                    continue
                if not isinstance(row, dict):
                    log.warning("report_line_not_an_object", path=str(self._path), line=line_no)
                    continue
                rows.append(row)
        return rows

    def _next_id(self) -> int:
        ids = [r.get("id") for r in self._read_rows()]
        return max((i for i in ids if isinstance(i, int)), default=0) + 1

    def append(self, report: Report) -> Report:
        """Store a report. Assigns the next integer id if it has none."""
        if report.id is None:
            report = dataclasses.replace(report, id=self._next_id())
        with open(self._path, "a", encoding="utf-8") as f:
            f.write(json.dumps(report.to_record(), separators=(",", ":")) + "\n")
        log.debug("report_written", report_id=report.id, path=str(self._path))
        return report

    def add(
        self,
        reporter_name: str,
        report_type: ReportType | str,
        description: str,
        lat: float,
        lng: float,
        photo_path: str | None = None,
        geofence_radius: float | None = None,
    ) -> Report:
        """Create and store a new report from submitted form fields."""
        report = Report(
            id=None,
            reporter_name=reporter_name,
            report_type=ReportType.parse(report_type),
            description=description,
            lat=float(lat),
            lng=float(lng),
            photo_path=photo_path,
            geofence_radius=geofence_radius,
        )
        return self.append(report)

    def read_reports(self) -> list[Report]:
        """All readable reports, newest first. Malformed rows are skipped."""
        reports = []
        for row in self._read_rows():
            try:
                reports.append(Report.from_record(row))
            except ValueError:
                log.warning("report_row_invalid", report_id=row.get("id"), exc_info=True)
        # Stable sort: rows with equal timestamps keep file order.
        reports.sort(key=lambda r: r.created_at, reverse=True)
        return reports
