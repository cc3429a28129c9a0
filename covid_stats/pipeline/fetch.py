"""Download upstream daily report CSVs that are not yet on disk."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from covid_stats.common.fs import ensure_dir, write_bytes
from covid_stats.common.http import HttpClient, TimeoutConfig
from covid_stats.common.logging import log_event, null_logger
from covid_stats.common.time_utils import date_range, report_stem


def report_url(base_url: str, report_date: date) -> str:
    return f"{base_url.rstrip('/')}/{report_stem(report_date)}.csv"


def run_fetch(
    fetch_config: dict,
    input_dir: Path,
    end_date: date,
    client: HttpClient,
    run_id: str,
    logger: logging.Logger | None = None,
) -> dict:
    logger = logger or null_logger()
    summary = {"downloaded": [], "skipped_existing": 0, "missing": []}
    if not fetch_config.get("enabled"):
        log_event(logger, "fetch disabled", run_id=run_id, stage="fetch", event="FETCH_SKIPPED", status="ok")
        return summary

    ensure_dir(input_dir)
    start_date = date.fromisoformat(str(fetch_config["start_date"]))
    timeout = TimeoutConfig(read=float(fetch_config.get("timeout_seconds", 60)))

    for report_date in date_range(start_date, end_date):
        path = input_dir / f"{report_stem(report_date)}.csv"
        if path.exists():
            summary["skipped_existing"] += 1
            continue

        text = client.get_text(report_url(fetch_config["base_url"], report_date), timeout=timeout)
        if text is None:
            # Upstream skips some days entirely.
            summary["missing"].append(report_date.isoformat())
            continue

        write_bytes(path, text.encode("utf-8"))
        summary["downloaded"].append(report_date.isoformat())
        log_event(
            logger,
            f"downloaded {path.name}",
            run_id=run_id,
            stage="fetch",
            report_date=report_date.isoformat(),
            event="REPORT_DOWNLOADED",
            status="ok",
        )

    log_event(
        logger,
        f"fetch complete: {len(summary['downloaded'])} downloaded, {len(summary['missing'])} missing",
        run_id=run_id,
        stage="fetch",
        event="FETCH_END",
        status="ok",
        rows_out=len(summary["downloaded"]),
    )
    return summary
