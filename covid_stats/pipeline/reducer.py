"""Fold report rows into cumulative and new counts."""

from __future__ import annotations

from datetime import date

from covid_stats.common.models import Counts, DatedCount, Location, ReportRow
from covid_stats.pipeline.history import HistoryStore
from covid_stats.pipeline.locations import LocationResolver


class TimeSeriesReducer:
    def __init__(self, resolver: LocationResolver, history: HistoryStore) -> None:
        self.resolver = resolver
        self.history = history

    def apply(self, granularity: str, row: ReportRow, report_date: date) -> Location | None:
        """Apply one row at one granularity for ``report_date``.

        Returns the resolved location, or ``None`` when the row carries no
        name for this granularity and was skipped.
        """
        location = self.resolver.resolve_row(granularity, row)
        if location is None:
            return None

        cumulative = row.counts()

        # Several rows for one place on one date add up.
        existing = self.history.get(granularity, location.key, report_date)
        if existing is not None:
            cumulative = cumulative.plus(existing.cumulative)

        previous = self.history.previous_cumulative(granularity, location.key, report_date) or Counts()
        dated_count = DatedCount(new=cumulative.increase_over(previous), cumulative=cumulative)
        self.history.record(granularity, location.key, report_date, dated_count)
        return location
