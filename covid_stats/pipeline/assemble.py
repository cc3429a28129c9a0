"""Join registered locations with their time series for output."""

from __future__ import annotations

from covid_stats.common.deterministic import sorted_by_key
from covid_stats.pipeline.history import HistoryStore
from covid_stats.pipeline.locations import LocationResolver


def assemble_granularity(granularity: str, resolver: LocationResolver, history: HistoryStore) -> list[dict]:
    """Every registered location ordered by key, each with its dated counts.

    A location registered only as an ancestor has no entries and gets an
    empty ``data`` mapping.
    """
    locations = sorted_by_key(resolver.registry(granularity).values())
    output = []
    for location in locations:
        series = history.sorted_series(granularity, location.key)
        output.append(
            {
                granularity: location.to_dict(),
                "data": {entry_date.isoformat(): dated_count.to_dict() for entry_date, dated_count in series.items()},
            }
        )
    return output
