"""Read daily report CSV rows into ReportRow records."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

from covid_stats.common.fs import read_csv_dicts
from covid_stats.common.models import ReportRow

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def lookup_field(row: Mapping[str, str | None], aliases: list[str]) -> str | None:
    """Return the first non-blank value among ``aliases``."""
    for header in aliases:
        value = row.get(header)
        if value is not None and value.strip():
            return value
    return None


def parse_count(raw: str | None) -> int:
    """Leading integer of ``raw``; anything unreadable or negative counts as 0.

    ``"12.0"`` reads as 12, the same way the upstream files were always read.
    """
    if raw is None:
        return 0
    match = _LEADING_INT_RE.match(raw)
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def to_report_row(row: Mapping[str, str | None], field_aliases: dict[str, list[str]]) -> ReportRow:
    return ReportRow(
        country=lookup_field(row, field_aliases["country"]),
        region=lookup_field(row, field_aliases["region"]),
        place=lookup_field(row, field_aliases["place"]),
        cases=parse_count(lookup_field(row, field_aliases["cases"])),
        deaths=parse_count(lookup_field(row, field_aliases["deaths"])),
        recoveries=parse_count(lookup_field(row, field_aliases["recoveries"])),
    )


def read_report_rows(path: Path, field_aliases: dict[str, list[str]]) -> tuple[list[str], list[ReportRow]]:
    headers, rows = read_csv_dicts(path)
    return headers, [to_report_row(row, field_aliases) for row in rows]
