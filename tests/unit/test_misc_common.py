import json
from datetime import date
from pathlib import Path

from covid_stats.common.deterministic import sorted_by_key, sorted_mapping
from covid_stats.common.errors import MissingRequiredField
from covid_stats.common.logging import build_logger, log_event
from covid_stats.common.models import Country, Counts
from covid_stats.common.time_utils import date_range, generate_run_id, parse_report_date, parse_run_date, report_stem


def test_sorted_by_key_orders_locations():
    locations = [Country(key="zambia", name="Zambia"), Country(key="albania", name="Albania")]
    assert [location.key for location in sorted_by_key(locations)] == ["albania", "zambia"]


def test_sorted_mapping_orders_dates():
    assert list(sorted_mapping({date(2020, 3, 2): 1, date(2020, 3, 1): 2})) == [date(2020, 3, 1), date(2020, 3, 2)]


def test_counts_increase_over_clamps_each_kind():
    assert Counts(5, 1, 9).increase_over(Counts(3, 2, 9)) == Counts(2, 0, 0)
    assert Counts(5, 1, 9).plus(Counts(1, 1, 1)) == Counts(6, 2, 10)


def test_report_date_round_trip_names():
    assert parse_report_date("03-01-2020") == date(2020, 3, 1)
    assert report_stem(date(2020, 3, 1)) == "03-01-2020"


def test_date_range_is_inclusive():
    assert date_range(date(2020, 2, 28), date(2020, 3, 1)) == [date(2020, 2, 28), date(2020, 2, 29), date(2020, 3, 1)]
    assert date_range(date(2020, 3, 2), date(2020, 3, 1)) == []


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_parse_run_date_defaults_and_iso():
    assert parse_run_date("2026-02-17") == "2026-02-17"
    assert len(parse_run_date(None)) == len("2026-02-17")


def test_missing_required_field_message():
    exc = MissingRequiredField("country", "row 3 of 03-01-2020.csv")
    assert exc.error_code == "MISSING_REQUIRED_FIELD"
    assert str(exc) == "Missing required field: country (row 3 of 03-01-2020.csv)"


def test_logger_writes_json_lines(tmp_path: Path):
    logger = build_logger("run-log-test", tmp_path, level="INFO")
    log_event(logger, "hello", run_id="run-log-test", stage="aggregate", event="REPORT_READ", rows_in=3)
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run_meta" / "run-log-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    payload = json.loads(lines[-1])
    assert payload["message"] == "hello"
    assert payload["stage"] == "aggregate"
    assert payload["rows_in"] == 3
    assert payload["granularity"] is None
    for handler in logger.handlers:
        handler.close()
