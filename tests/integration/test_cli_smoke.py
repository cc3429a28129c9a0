import shutil
from pathlib import Path

import pytest

from covid_stats.cli import parse_args, run_command
from covid_stats.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS
from covid_stats.common.fs import read_json

FIXTURE_REPORTS = Path("tests/fixtures/daily_reports")


def _aggregate_args(input_dir: Path, output_dir: Path, log_dir: Path, run_id: str = "run-test"):
    return parse_args(
        [
            "aggregate",
            "--config-dir",
            "config",
            "--input-dir",
            str(input_dir),
            "--output-dir",
            str(output_dir),
            "--log-dir",
            str(log_dir),
            "--run-id",
            run_id,
        ]
    )


@pytest.mark.integration
def test_cli_aggregate_generates_expected_artifacts(tmp_path: Path):
    out_dir = tmp_path / "v1"
    exit_code = run_command(_aggregate_args(FIXTURE_REPORTS, out_dir, tmp_path / "data"))

    assert exit_code == EXIT_SUCCESS
    for plural in ("countries", "regions", "places"):
        assert (out_dir / plural / "stats_pretty.json").exists()
        assert (out_dir / plural / "stats.json").exists()
    assert (tmp_path / "data" / "run_meta" / "run-test.log.jsonl").exists()

    summary = read_json(out_dir / "run_summary.json")
    assert summary["status"] == "success"
    assert summary["first_date"] == "2020-01-22"
    assert summary["last_date"] == "2020-03-23"
    assert summary["totals"]["reports"] == 3
    assert summary["totals"]["rows"] == 14
    assert summary["totals"]["locations"] == {"country": 3, "region": 4, "place": 3}


@pytest.mark.integration
def test_cli_aggregate_counts_across_header_conventions_and_gaps(tmp_path: Path):
    out_dir = tmp_path / "v1"
    assert run_command(_aggregate_args(FIXTURE_REPORTS, out_dir, tmp_path / "data")) == EXIT_SUCCESS

    countries = {entry["country"]["key"]: entry for entry in read_json(out_dir / "countries" / "stats.json")}
    assert list(countries) == ["china", "japan", "united-states"]

    china = countries["china"]
    assert china["country"] == {"key": "china", "name": "China"}
    assert china["data"]["2020-01-24"] == {
        "new": {"cases": 127, "deaths": 7, "recoveries": 4},
        "cumulative": {"cases": 585, "deaths": 24, "recoveries": 32},
    }
    assert china["data"]["2020-03-23"]["new"] == {"cases": 67795, "deaths": 3137, "recoveries": 59815}

    japan = countries["japan"]["data"]
    assert japan["2020-01-24"] == {
        "new": {"cases": 0, "deaths": 0, "recoveries": 0},
        "cumulative": {"cases": 1, "deaths": 0, "recoveries": 0},
    }
    assert japan["2020-03-23"]["new"]["cases"] == 1127

    regions = read_json(out_dir / "regions" / "stats.json")
    assert [entry["region"]["key"] for entry in regions] == [
        "beijing-china",
        "california-united-states",
        "hubei-china",
        "washington-united-states",
    ]

    places = {entry["place"]["key"]: entry for entry in read_json(out_dir / "places" / "stats.json")}
    alameda = places["alameda-california-united-states"]
    assert alameda["place"]["full_name"] == "Alameda, California, United States"
    assert alameda["place"]["region"]["key"] == "california-united-states"
    assert alameda["data"] == {
        "2020-03-23": {
            "new": {"cases": 12, "deaths": 1, "recoveries": 0},
            "cumulative": {"cases": 12, "deaths": 1, "recoveries": 0},
        }
    }


@pytest.mark.integration
def test_cli_aggregate_fails_hard_on_row_without_country(tmp_path: Path):
    input_dir = tmp_path / "reports"
    shutil.copytree(FIXTURE_REPORTS, input_dir)
    (input_dir / "03-24-2020.csv").write_text(
        "Admin2,Province_State,Country_Region,Confirmed,Deaths,Recovered\nAlameda,California,,13,1,0\n",
        encoding="utf-8",
    )

    exit_code = run_command(_aggregate_args(input_dir, tmp_path / "v1", tmp_path / "data"))

    assert exit_code == EXIT_HARD_FAIL
    assert not (tmp_path / "v1" / "run_summary.json").exists()


@pytest.mark.integration
def test_cli_aggregate_fails_on_empty_input_dir(tmp_path: Path):
    input_dir = tmp_path / "reports"
    input_dir.mkdir()
    assert run_command(_aggregate_args(input_dir, tmp_path / "v1", tmp_path / "data")) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_fetch_disabled_by_default_is_successful(tmp_path: Path):
    args = parse_args(
        [
            "fetch",
            "--config-dir",
            "config",
            "--input-dir",
            str(tmp_path / "reports"),
            "--log-dir",
            str(tmp_path / "data"),
            "--end-date",
            "2020-01-23",
        ]
    )
    assert run_command(args) == EXIT_SUCCESS
    assert not (tmp_path / "reports").exists()
