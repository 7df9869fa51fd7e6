from pathlib import Path

import pytest

from batrank.ingest import (
    BatterParseError,
    BatterRow,
    load_records_from_csv,
    parse_batter_csv,
    resolve_mapping,
    rows_to_records,
)


def _sample_csv() -> str:
    return """"Name","HR","R","RBI","SB","AVG","playerid"
"Aaron Judge","62","133","131","16",".311","15640"
"Shohei Ohtani","34","90","95","11",".273","19755"
"Paul Goldschmidt","35","106","115","7",".317","9218"
"""


def test_parse_batter_csv_default_mapping():
    rows = parse_batter_csv(_sample_csv())
    records = rows_to_records(rows)

    assert [record.player_id for record in records] == ["15640", "19755", "9218"]
    judge = records[0]
    assert judge.name == "Aaron Judge"
    assert judge.home_runs == 62
    assert judge.runs == 133
    assert judge.rbi == 131
    assert judge.stolen_bases == 16
    assert judge.batting_average == pytest.approx(0.311)
    assert rows[2].row_number == 3


def test_parse_batter_csv_custom_mapping():
    text = """id,player,home_runs,runs,rbi,steals,avg
a1,First Player,12,50,48,3,0.250
"""
    mapping = {
        "player_id": "id",
        "name": "player",
        "home_runs": "home_runs",
        "runs": "runs",
        "rbi": "rbi",
        "stolen_bases": "steals",
        "batting_average": "avg",
    }

    records = rows_to_records(parse_batter_csv(text, mapping=mapping))

    assert records[0].player_id == "a1"
    assert records[0].stolen_bases == 3


def test_partial_mapping_is_merged_over_defaults():
    resolved = resolve_mapping({"player_id": "PlayerId"})

    assert resolved["player_id"] == "PlayerId"
    assert resolved["home_runs"] == "HR"


def test_unknown_mapping_key_raises():
    with pytest.raises(KeyError):
        resolve_mapping({"walks": "BB"})


def test_counts_accept_thousands_separators_and_whitespace():
    row = BatterRow.from_mapping(
        {"playerid": " p1 ", "Name": "Iron Man", "HR": " 1,002 ", "R": "0", "RBI": "7", "SB": "0", "AVG": "0.3"},
        resolve_mapping(None),
        row_number=1,
    )

    records = rows_to_records([row])

    assert records[0].player_id == "p1"
    assert records[0].home_runs == 1002


def test_missing_columns_raise():
    with pytest.raises(BatterParseError, match="missing columns: SB"):
        parse_batter_csv("Name,HR,R,RBI,AVG,playerid\nA,1,2,3,.250,x\n")


@pytest.mark.parametrize(
    ("line", "fragment"),
    [
        ('"Bad Count","ten","1","1","1",".250","b1"', "HR 'ten'"),
        ('"Negative","-3","1","1","1",".250","b1"', "HR '-3'"),
        ('"Blank","","1","1","1",".250","b1"', "HR is empty"),
        ('"High Avg","1","1","1","1","1.250","b1"', "outside [0, 1]"),
        ('"Text Avg","1","1","1","1","n/a","b1"', "AVG 'n/a' is not numeric"),
        ('"No Id","1","1","1","1",".250",""', "player id is empty"),
    ],
)
def test_rows_to_records_reports_bad_values(line, fragment):
    text = '"Name","HR","R","RBI","SB","AVG","playerid"\n' + line + "\n"

    with pytest.raises(BatterParseError) as excinfo:
        rows_to_records(parse_batter_csv(text))

    assert fragment in str(excinfo.value)
    assert excinfo.value.row_number == 1


def test_duplicate_player_ids_rejected():
    text = _sample_csv() + '"Judge Again","1","1","1","1",".100","15640"\n'

    with pytest.raises(BatterParseError, match="duplicate player id '15640'") as excinfo:
        rows_to_records(parse_batter_csv(text))

    assert excinfo.value.row_number == 4


def test_load_records_from_csv_handles_bom(tmp_path: Path):
    path = tmp_path / "batters.csv"
    path.write_text("\ufeff" + _sample_csv(), encoding="utf-8")

    records = load_records_from_csv(path)

    assert len(records) == 3
    assert records[1].name == "Shohei Ohtani"


def test_header_only_file_yields_no_records(tmp_path: Path):
    path = tmp_path / "empty.csv"
    path.write_text('"Name","HR","R","RBI","SB","AVG","playerid"\n', encoding="utf-8")

    assert load_records_from_csv(path) == []
