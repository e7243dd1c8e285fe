from pathlib import Path

import pytest

from pyfide.config_loader import MappingProfile
from pyfide.ingest import DEFAULT_PLAYERS_MAPPING, PlayerRow, load_players_csv, rows_to_records


HEADER = (
    "id_number,name,federation,sex,title,w_title,o_title,foa,"
    "standard_rating,standard_games,sk,rapid_rating,rapid_games,rk,"
    "blitz_rating,blitz_games,bk,birthday,flag"
)


def _write_csv(tmp_path: Path, *lines: str, header: str = HEADER) -> Path:
    path = tmp_path / "players.csv"
    path.write_text("\n".join((header, *lines)) + "\n", encoding="utf-8")
    return path


def test_load_players_csv_normalises_rows(tmp_path: Path):
    path = _write_csv(
        tmp_path,
        "1001, Aarav Sharma ,nep,m,gm,,FT; NI,,2450,12,10,2400,0,20,2380,5,20,1990,",
        "1002,Bina Thapa,NEP,F,,WIM,,,2100,,,0,,,,,,2005,w",
        "1003,Chandra Rai,IND,M,,,IA,IO,1800,,,,,,,,,0000,i",
    )

    records, report = load_players_csv(path)

    assert (report.total_rows, report.loaded, report.skipped) == (3, 3, [])
    first, second, third = records
    assert first.name == "Aarav Sharma"
    assert first.federation == "NEP"
    assert first.gender == "M"
    assert first.titles == ("GM",)
    assert first.other_titles == ("FT", "NI")
    assert (first.standard_rating, first.standard_games, first.standard_k) == (2450, 12, 10)
    assert first.activity_flag is None
    assert second.women_titles == ("WIM",)
    assert second.rapid_rating == 0
    assert second.activity_flag == "w"
    assert third.birth_year is None
    assert third.additional_designations == ("IO",)
    assert not third.is_active


def test_invalid_and_duplicate_rows_are_skipped(tmp_path: Path):
    path = _write_csv(
        tmp_path,
        "1,Good Player,NEP,M,,,,,1500,,,,,,,,,1999,",
        "2,Bad Gender,NEP,X,,,,,1500,,,,,,,,,1999,",
        "3,Bad Rating,NEP,F,,,,,abc,,,,,,,,,1999,",
        "1,Duplicate,NEP,M,,,,,1600,,,,,,,,,1999,",
        "4,Bad Year,NEP,M,,,,,0,,,,,,,,,19x9,",
    )

    records, report = load_players_csv(path)

    assert [record.id for record in records] == ["1"]
    assert report.loaded == 1
    assert [row.line for row in report.skipped] == [3, 4, 5, 6]
    reasons = [row.reason for row in report.skipped]
    assert reasons[0].startswith("gender")
    assert "abc" in reasons[1]
    assert reasons[2] == "duplicate id 1"
    assert reasons[3].startswith("birth_year")


def test_custom_column_mapping(tmp_path: Path):
    path = _write_csv(
        tmp_path,
        "77,Mapped Player,NEP,F,2222",
        header="fide_id,name,federation,gender,std",
    )
    mapping = {**DEFAULT_PLAYERS_MAPPING, "id": "fide_id", "gender": "gender", "standard_rating": "std"}

    records, report = load_players_csv(path, mapping=mapping)

    assert report.loaded == 1
    assert records[0].id == "77"
    assert records[0].standard_rating == 2222
    assert records[0].titles == ()


def test_rows_to_records_from_mapping():
    row = PlayerRow.from_mapping(
        2,
        {"pid": " 5 ", "n": "Someone", "f": "ind", "g": "f"},
        {"id": "pid", "name": "n", "federation": "f", "gender": "g"},
    )

    records, report = rows_to_records([row])

    assert report.skipped == []
    assert records[0].id == "5"
    assert records[0].gender == "F"


def test_mapping_profile_round_trip(tmp_path: Path):
    path = tmp_path / "profile.json"
    MappingProfile({"gender": "gender_code"}).save(path)

    assert MappingProfile.load(path).players_mapping == {"gender": "gender_code"}


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_players_csv(tmp_path / "absent.csv")


@pytest.mark.parametrize("cell", ["inf", "-inf", "nan", "1e400"])
def test_non_finite_rating_skips_only_that_row(tmp_path: Path, cell):
    path = _write_csv(
        tmp_path,
        f"1,Broken Rating,NEP,M,,,,,{cell},,,,,,,,,1999,",
        "2,Fine Player,NEP,F,,,,,1700,,,,,,,,,2001,",
    )

    records, report = load_players_csv(path)

    assert [record.id for record in records] == ["2"]
    assert [row.line for row in report.skipped] == [2]
    assert cell in report.skipped[0].reason
