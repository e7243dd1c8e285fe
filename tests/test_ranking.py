import pytest

from pyfide.config import get_discipline, require_discipline, resolve_discipline
from pyfide.errors import InvalidParameter
from pyfide.query import PageRequest, SortKey, assign_ranks, ranking_sort
from pyfide.query.ranking import assign_ranks_with_age
from pyfide.store import sort_records

from tests.factories import make_player


@pytest.mark.parametrize("page, size", [(0, 1), (0, 20), (3, 7), (10, 100)])
def test_rank_is_page_offset_plus_position(page, size):
    records = [make_player(str(index)) for index in range(min(size, 5))]
    ranked = assign_ranks(records, PageRequest(page=page, size=size))

    assert [player.rank for player in ranked] == [page * size + k + 1 for k in range(len(records))]
    assert ranked[0].id == records[0].id


def test_ranked_player_carries_record_fields():
    record = make_player("9", standard_rating=2222, birth_year="2000")
    [ranked] = assign_ranks_with_age([record], PageRequest(page=1, size=10), current_year=2025)

    assert ranked.rank == 11
    assert ranked.age == 25
    assert ranked.standard_rating == 2222
    assert ranked.model_dump(by_alias=True)["standardRating"] == 2222


def test_ranking_sort_breaks_ties_by_id():
    records = [
        make_player("b", rapid_rating=1800),
        make_player("c", rapid_rating=2000),
        make_player("a", rapid_rating=1800),
    ]
    ordered = sort_records(records, ranking_sort(get_discipline("rapid")))

    assert [record.id for record in ordered] == ["c", "a", "b"]


def test_sort_puts_missing_values_last():
    records = [make_player("1"), make_player("2", birth_year="1990"), make_player("3", birth_year="2000")]
    ordered = sort_records(records, (SortKey("birth_year", descending=False),))

    assert [record.id for record in ordered] == ["2", "3", "1"]


def test_discipline_resolution():
    assert resolve_discipline("BLITZ").rating_field == "blitz_rating"
    assert resolve_discipline("classical").key == "standard"
    assert require_discipline(None).key == "standard"
    with pytest.raises(InvalidParameter) as excinfo:
        require_discipline("classical")
    assert excinfo.value.param == "ratingType"
    with pytest.raises(KeyError):
        get_discipline("bullet")
