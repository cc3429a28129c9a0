"""Minimal strict schema for the aggregate YAML config."""

from __future__ import annotations

from datetime import date

from covid_stats.common.constants import GRANULARITIES
from covid_stats.common.errors import ConfigError

FIELD_NAMES = ("country", "region", "place", "cases", "deaths", "recoveries")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _validate_fields(fields: dict) -> None:
    _assert_required_keys(fields, set(FIELD_NAMES), "fields")
    for name in FIELD_NAMES:
        aliases = fields[name]
        if not isinstance(aliases, list) or not aliases:
            raise ConfigError(f"fields.{name} must be a non-empty list of header names")


def _validate_granularities(granularities: dict) -> None:
    _assert_required_keys(granularities, set(GRANULARITIES), "granularities")
    unknown = set(granularities) - set(GRANULARITIES)
    if unknown:
        raise ConfigError(f"Unknown granularities: {', '.join(sorted(unknown))}")
    for name in GRANULARITIES:
        _assert_required_keys(granularities[name], {"plural_name"}, f"granularities.{name}")


def _validate_fetch(fetch: dict) -> None:
    _assert_required_keys(fetch, {"enabled", "base_url", "start_date"}, "fetch")
    try:
        date.fromisoformat(str(fetch["start_date"]))
    except ValueError as exc:
        raise ConfigError(f"fetch.start_date is not an ISO date: {fetch['start_date']}") from exc


def validate_aggregate_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"input", "output", "countries", "fields", "granularities"}
    top_known = top_required | {"fetch"}
    _assert_required_keys(cfg, top_required, "aggregate config")
    _assert_no_unknown_keys(cfg, top_known, "aggregate config", allow_unknown)

    _assert_required_keys(cfg["input"], {"daily_reports_dir", "filename_glob"}, "input")
    _assert_required_keys(cfg["output"], {"api_dir", "pretty_filename", "compact_filename"}, "output")
    _assert_required_keys(cfg["countries"], {"normalized_names"}, "countries")
    if not isinstance(cfg["countries"]["normalized_names"], dict):
        raise ConfigError("countries.normalized_names must be a mapping")
    _validate_fields(cfg["fields"])
    _validate_granularities(cfg["granularities"])
    if "fetch" in cfg:
        _validate_fetch(cfg["fetch"])

    return cfg
