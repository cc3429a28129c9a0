"""Aggregate daily reports into per-granularity time series."""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Iterable

from covid_stats.common.config_loader import AggregateConfig
from covid_stats.common.constants import GRANULARITIES
from covid_stats.common.errors import MissingRequiredField, StageError
from covid_stats.common.logging import log_event, null_logger
from covid_stats.common.models import ReportRow
from covid_stats.pipeline.assemble import assemble_granularity
from covid_stats.pipeline.discover import discover_daily_reports
from covid_stats.pipeline.export import write_granularity_outputs
from covid_stats.pipeline.history import HistoryStore
from covid_stats.pipeline.locations import LocationResolver
from covid_stats.pipeline.read_reports import read_report_rows
from covid_stats.pipeline.reducer import TimeSeriesReducer


@dataclass
class AggregationContext:
    """All state built up across one run, read-only once folding ends."""

    resolver: LocationResolver
    history: HistoryStore
    reducer: TimeSeriesReducer
    last_date: date | None = None
    report_count: int = 0
    row_count: int = 0
    skipped_rows: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    @classmethod
    def create(cls, normalized_country_names: dict[str, str] | None = None) -> AggregationContext:
        resolver = LocationResolver(normalized_country_names)
        history = HistoryStore()
        return cls(resolver=resolver, history=history, reducer=TimeSeriesReducer(resolver, history))

    def fold_report(self, report_date: date, rows: Iterable[ReportRow]) -> int:
        """Apply one daily batch; batches must arrive in ascending date order."""
        if self.last_date is not None and report_date <= self.last_date:
            raise StageError(
                f"Daily report {report_date.isoformat()} arrived after {self.last_date.isoformat()}; "
                "reports must be folded in ascending date order"
            )
        self.history.observe_date(report_date)
        self.last_date = report_date
        self.report_count += 1

        rows_in = 0
        for row in rows:
            rows_in += 1
            if row.country is None:
                raise MissingRequiredField("country", f"row {rows_in} of the {report_date.isoformat()} report")
            for granularity in GRANULARITIES:
                if self.reducer.apply(granularity, row, report_date) is None:
                    self.skipped_rows[granularity] += 1
        self.row_count += rows_in
        return rows_in

    def output(self, granularity: str) -> list[dict]:
        return assemble_granularity(granularity, self.resolver, self.history)

    def location_counts(self) -> dict[str, int]:
        return {granularity: len(self.resolver.registry(granularity)) for granularity in GRANULARITIES}


def aggregate_batches(
    batches: Iterable[tuple[date, Iterable[ReportRow]]],
    normalized_country_names: dict[str, str] | None = None,
) -> AggregationContext:
    context = AggregationContext.create(normalized_country_names)
    for report_date, rows in batches:
        context.fold_report(report_date, rows)
    return context


def run_aggregate(
    config: AggregateConfig,
    input_dir: Path,
    api_dir: Path,
    run_id: str,
    logger: logging.Logger | None = None,
) -> AggregationContext:
    logger = logger or null_logger()
    reports = discover_daily_reports(input_dir, config.filename_glob)
    if not reports:
        raise StageError(f"No daily reports found in {input_dir}")

    context = AggregationContext.create(config.normalized_country_names)
    for report in reports:
        started = time.monotonic()
        headers, rows = read_report_rows(report.path, config.field_aliases)
        context.fold_report(report.date, rows)
        log_event(
            logger,
            f"read {report.path.name} headers: {', '.join(headers)}",
            run_id=run_id,
            stage="aggregate",
            report_date=report.date.isoformat(),
            event="REPORT_READ",
            status="ok",
            rows_in=len(rows),
            duration_ms=int((time.monotonic() - started) * 1000),
        )

    for granularity in GRANULARITIES:
        output = context.output(granularity)
        write_granularity_outputs(
            output,
            api_dir / config.plural_name(granularity),
            pretty_filename=config.raw["output"]["pretty_filename"],
            compact_filename=config.raw["output"]["compact_filename"],
        )
        log_event(
            logger,
            f"wrote {config.plural_name(granularity)} stats",
            run_id=run_id,
            stage="aggregate",
            granularity=granularity,
            event="GRANULARITY_WRITTEN",
            status="ok",
            rows_out=len(output),
            locations=len(output),
        )

    return context
