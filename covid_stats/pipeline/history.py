"""Per-location dated count history with bounded lookback."""

from __future__ import annotations

from datetime import date, timedelta

from covid_stats.common.constants import GRANULARITIES
from covid_stats.common.deterministic import sorted_mapping
from covid_stats.common.models import Counts, DatedCount


class HistoryStore:
    """Dated counts per granularity and location key.

    Lookback walks one calendar day at a time and stops at the first date
    observed in the run. The bound is global: a key first seen in a late
    report still scans back to the run's first date, and finding nothing
    there means its first entry counts from zero.
    """

    def __init__(self) -> None:
        self.first_date: date | None = None
        self.series: dict[str, dict[str, dict[date, DatedCount]]] = {granularity: {} for granularity in GRANULARITIES}

    def observe_date(self, report_date: date) -> None:
        if self.first_date is None:
            self.first_date = report_date

    def ensure_series(self, granularity: str, key: str) -> dict[date, DatedCount]:
        return self.series[granularity].setdefault(key, {})

    def get(self, granularity: str, key: str, report_date: date) -> DatedCount | None:
        return self.series[granularity].get(key, {}).get(report_date)

    def record(self, granularity: str, key: str, report_date: date, dated_count: DatedCount) -> None:
        self.ensure_series(granularity, key)[report_date] = dated_count

    def previous_cumulative(self, granularity: str, key: str, report_date: date) -> Counts | None:
        if self.first_date is None:
            return None
        entries = self.series[granularity].get(key, {})
        previous_date = report_date - timedelta(days=1)
        while previous_date >= self.first_date:
            entry = entries.get(previous_date)
            if entry is not None:
                return entry.cumulative
            previous_date -= timedelta(days=1)
        return None

    def sorted_series(self, granularity: str, key: str) -> dict[date, DatedCount]:
        return sorted_mapping(self.series[granularity].get(key, {}))
