"""Daily report discovery."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from covid_stats.common.errors import StageError
from covid_stats.common.time_utils import parse_report_date


@dataclass(frozen=True)
class DailyReport:
    date: date
    path: Path


def discover_daily_reports(input_dir: Path, filename_glob: str = "*.csv") -> list[DailyReport]:
    """List daily report files ordered by the calendar date in their names.

    File names sort by month first, so ordering by name would interleave years.
    """
    if not input_dir.is_dir():
        raise StageError(f"Missing daily reports directory: {input_dir}")

    reports: dict[date, DailyReport] = {}
    for path in sorted(input_dir.glob(filename_glob)):
        if not path.is_file():
            continue
        try:
            report_date = parse_report_date(path.stem)
        except ValueError as exc:
            raise StageError(f"Daily report name is not MM-DD-YYYY: {path.name}") from exc
        if report_date in reports:
            raise StageError(f"Two daily reports for {report_date.isoformat()}: {reports[report_date].path.name}, {path.name}")
        reports[report_date] = DailyReport(date=report_date, path=path)

    return [reports[key] for key in sorted(reports)]
