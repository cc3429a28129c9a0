"""Run summary report."""

from __future__ import annotations

from pathlib import Path

from covid_stats.common.constants import GRANULARITIES
from covid_stats.common.fs import write_json


def write_run_summary(
    api_dir: Path,
    *,
    run_id: str,
    status: str,
    aggregation=None,
    fetch_summary: dict | None = None,
) -> Path:
    totals = {
        "reports": 0,
        "rows": 0,
        "locations": {granularity: 0 for granularity in GRANULARITIES},
        "skipped_rows": {granularity: 0 for granularity in GRANULARITIES},
    }
    first_date = None
    last_date = None

    if aggregation is not None:
        totals["reports"] = aggregation.report_count
        totals["rows"] = aggregation.row_count
        totals["locations"].update(aggregation.location_counts())
        totals["skipped_rows"].update(aggregation.skipped_rows)
        if aggregation.history.first_date is not None:
            first_date = aggregation.history.first_date.isoformat()
        if aggregation.last_date is not None:
            last_date = aggregation.last_date.isoformat()

    payload = {
        "run_id": run_id,
        "status": status,
        "first_date": first_date,
        "last_date": last_date,
        "totals": totals,
        "fetch": fetch_summary,
    }
    summary_path = api_dir / "run_summary.json"
    write_json(summary_path, payload)
    return summary_path
