"""Date helpers for report names and run metadata."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from covid_stats.common.constants import REPORT_DATE_FORMAT


def utc_today_iso() -> str:
    return datetime.now(tz=timezone.utc).date().isoformat()


def parse_run_date(value: str | None) -> str:
    if not value:
        return utc_today_iso()
    parsed = date.fromisoformat(value)
    return parsed.isoformat()


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def parse_report_date(stem: str) -> date:
    """Parse a daily report stem such as ``03-01-2020`` into a date."""
    month, day, year = stem.split("-")
    return date(int(year), int(month), int(day))


def report_stem(value: date) -> str:
    return value.strftime(REPORT_DATE_FORMAT)


def date_range(start: date, end: date) -> list[date]:
    days = (end - start).days
    return [start + timedelta(days=offset) for offset in range(days + 1)]


def generate_run_id() -> str:
    return datetime.now(tz=timezone.utc).strftime("run-%Y%m%dT%H%M%S%fZ")
