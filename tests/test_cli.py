import json
from pathlib import Path

import pytest

from pyfide.cli import main


HEADER = "id_number,name,federation,sex,title,o_title,standard_rating,rapid_rating,birthday,flag"
ROWS = (
    "1001,Aarav Sharma,NEP,M,GM,FT,2450,2400,1990,",
    "1002,Bina Thapa,NEP,F,WIM,,2100,2050,2005,w",
    "1003,Chandra Rai,NEP,M,,IA,1800,0,1970,i",
    "1004,Bad Row,NEP,Z,,,1000,0,2000,",
)


@pytest.fixture
def loaded_db(tmp_path: Path, capsys) -> Path:
    csv_path = tmp_path / "players.csv"
    csv_path.write_text("\n".join((HEADER, *ROWS)) + "\n", encoding="utf-8")
    db_path = tmp_path / "players.sqlite"

    assert main(["--db", str(db_path), "load", str(csv_path), "--report", str(tmp_path / "report.json")]) == 0
    capsys.readouterr()
    return db_path


def _run_json(capsys, *argv: str):
    assert main(list(argv)) == 0
    return json.loads(capsys.readouterr().out)


def test_load_reports_skipped_rows(tmp_path: Path, capsys):
    csv_path = tmp_path / "players.csv"
    csv_path.write_text("\n".join((HEADER, *ROWS)) + "\n", encoding="utf-8")

    exit_code = main(["--db", str(tmp_path / "players.sqlite"), "load", str(csv_path)])
    out = capsys.readouterr().out

    assert exit_code == 0
    assert "Loaded 3/4 players" in out
    assert "line 5" in out


def test_load_writes_report(loaded_db: Path):
    report = json.loads((loaded_db.parent / "report.json").read_text(encoding="utf-8"))

    assert report["loaded"] == 3
    assert [row["line"] for row in report["skipped"]] == [5]


def test_rankings(loaded_db: Path, capsys):
    page = _run_json(capsys, "--db", str(loaded_db), "rankings", "standard", "--size", "1")

    assert [(player["id"], player["rank"]) for player in page["data"]] == [("1001", 1)]
    assert page["pagination"]["totalItems"] == 2
    assert page["pagination"]["hasNext"] is True


def test_rankings_include_inactive(loaded_db: Path, capsys):
    page = _run_json(capsys, "--db", str(loaded_db), "rankings", "rapid", "--include-inactive")
    assert [player["id"] for player in page["data"]] == ["1001", "1002", "1003"]


def test_stats_and_titles(loaded_db: Path, capsys):
    stats = _run_json(capsys, "--db", str(loaded_db), "stats", "--include-inactive")
    trainers = _run_json(capsys, "--db", str(loaded_db), "titles", "--type", "trainers")

    assert (stats["totalPlayers"], stats["inactivePlayers"]) == (3, 1)
    assert [player["name"] for player in trainers["players"]] == ["Aarav Sharma"]


def test_age_groups_lists_every_group(loaded_db: Path, capsys):
    groups = _run_json(capsys, "--db", str(loaded_db), "age-groups")
    assert len(groups) == 11


def test_invalid_input_exits_with_error(loaded_db: Path, capsys):
    exit_code = main(["--db", str(loaded_db), "rankings", "standard", "--age-group", "U9"])

    assert exit_code == 2
    assert capsys.readouterr().err.startswith("error: Invalid age group code")


def test_column_mapping_profile(tmp_path: Path, capsys):
    csv_path = tmp_path / "renamed.csv"
    csv_path.write_text("fid,name,federation,sex\n9,Renamed Player,IND,F\n", encoding="utf-8")
    profile = tmp_path / "profile.json"
    db = str(tmp_path / "players.sqlite")

    assert main(["--db", db, "load", str(csv_path), "--column", "id=fid", "--save-profile", str(profile)]) == 0
    assert main(["--db", db, "load", str(csv_path), "--load-profile", str(profile)]) == 0
    assert "Loaded 1/1 players" in capsys.readouterr().out


def test_malformed_column_mapping_is_a_usage_error(tmp_path: Path, capsys):
    csv_path = tmp_path / "players.csv"
    csv_path.write_text(HEADER + "\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--db", str(tmp_path / "players.sqlite"), "load", str(csv_path), "--column", "gender"])

    assert excinfo.value.code == 2
    assert "Invalid mapping entry 'gender', expected key=value" in capsys.readouterr().err
