from pathlib import Path

from covid_stats.common.models import ReportRow
from covid_stats.pipeline.read_reports import lookup_field, parse_count, read_report_rows

FIELD_ALIASES = {
    "country": ["Country/Region", "Country_Region"],
    "region": ["Province/State", "Province_State"],
    "place": ["Admin2"],
    "cases": ["Confirmed"],
    "deaths": ["Deaths"],
    "recoveries": ["Recovered"],
}


def test_parse_count_reads_leading_integer():
    assert parse_count("12") == 12
    assert parse_count(" 12.0") == 12
    assert parse_count("7 cases") == 7


def test_parse_count_defaults_to_zero():
    assert parse_count(None) == 0
    assert parse_count("") == 0
    assert parse_count("n/a") == 0
    assert parse_count("-4") == 0


def test_lookup_field_tries_aliases_in_order_and_ignores_blanks():
    assert lookup_field({"Country_Region": "Italy"}, FIELD_ALIASES["country"]) == "Italy"
    assert lookup_field({"Country/Region": "", "Country_Region": "Italy"}, FIELD_ALIASES["country"]) == "Italy"
    assert lookup_field({"Province/State": "  "}, FIELD_ALIASES["region"]) is None


def test_read_report_rows_handles_old_headers(tmp_path: Path):
    path = tmp_path / "01-22-2020.csv"
    path.write_text(
        "Province/State,Country/Region,Last Update,Confirmed,Deaths,Recovered\n"
        "Hubei,Mainland China,1/22/2020 17:00,444,,28\n"
        ",Japan,1/22/2020 17:00,2,,\n",
        encoding="utf-8",
    )

    headers, rows = read_report_rows(path, FIELD_ALIASES)

    assert headers[:2] == ["Province/State", "Country/Region"]
    assert rows == [
        ReportRow(country="Mainland China", region="Hubei", place=None, cases=444, deaths=0, recoveries=28),
        ReportRow(country="Japan", region=None, place=None, cases=2, deaths=0, recoveries=0),
    ]


def test_read_report_rows_handles_new_headers_with_bom(tmp_path: Path):
    path = tmp_path / "03-23-2020.csv"
    path.write_bytes(
        "\ufeffFIPS,Admin2,Province_State,Country_Region,Last_Update,Lat,Long_,Confirmed,Deaths,Recovered,Active,Combined_Key\n"
        '06001,Alameda,California,US,2020-03-23 23:19:34,37.6,-121.9,12,1,0,11,"Alameda, California, US"\n'.encode("utf-8")
    )

    _headers, rows = read_report_rows(path, FIELD_ALIASES)

    assert rows == [ReportRow(country="US", region="California", place="Alameda", cases=12, deaths=1, recoveries=0)]
