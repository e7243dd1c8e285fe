import pytest

from pyfide.classify.age import age_group_range
from pyfide.errors import InvalidParameter
from pyfide.query import (
    MATCH_ALL,
    Equals,
    InSet,
    NonEmpty,
    Range,
    SearchParams,
    build_age_group_filter,
    build_federation_filter,
    build_name_filter,
    build_ranking_filter,
    build_search_filter,
    build_title_filter,
    matches,
    parse_flag,
    parse_gender,
    parse_rating_bound,
)
from pyfide.query.predicates import Contains, predicate_matches

from tests.factories import make_player, sample_population


def _ids(criteria):
    return [record.id for record in sample_population() if matches(record, criteria)]


def test_search_normalises_federation_and_applies_min_rating():
    criteria = build_search_filter(SearchParams(federation="nep", min_rating="2000"))

    assert criteria.get("federation") == Equals("NEP")
    assert criteria.get("standard_rating") == Range(gte=2000, lte=None)
    assert _ids(criteria) == ["1001", "1002", "1007"]


def test_has_title_overrides_specific_title():
    criteria = build_search_filter(SearchParams(title="GM", has_title="true"))

    assert criteria.get("titles") == NonEmpty()
    assert _ids(criteria) == ["1001", "1002", "1005", "1007"]


def test_specific_title_alone():
    criteria = build_search_filter(SearchParams(title="GM"))
    assert criteria.get("titles") == InSet(("GM",))
    assert _ids(criteria) == ["1001"]


def test_absent_parameters_leave_everything_unconstrained():
    criteria = build_search_filter(SearchParams(federation="", gender=None, has_title="false"))
    assert criteria.is_empty
    assert len(_ids(criteria)) == 9


@pytest.mark.parametrize("value", ["X", "m", "male"])
def test_bad_gender_rejected(value):
    with pytest.raises(InvalidParameter) as excinfo:
        parse_gender(value)
    assert excinfo.value.param == "gender"
    assert excinfo.value.message == "Gender must be 'M' or 'F'"


def test_bad_gender_rejected_in_search():
    with pytest.raises(InvalidParameter):
        build_search_filter(SearchParams(gender="Z"))


@pytest.mark.parametrize("value", ["abc", "12x", "-5", "1.5"])
def test_bad_rating_bound_rejected(value):
    with pytest.raises(InvalidParameter) as excinfo:
        parse_rating_bound(value, "minRating")
    assert excinfo.value.param == "minRating"


def test_rating_bound_parses_digits():
    assert parse_rating_bound(" 2100 ", "maxRating") == 2100
    assert parse_rating_bound("", "maxRating") is None


@pytest.mark.parametrize("value, expected", [("true", True), ("TRUE", True), ("1", False), (None, False), (True, True)])
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected


def test_ranking_filter_active_only_by_default():
    assert _ids(build_ranking_filter()) == ["1001", "1002", "1004", "1005", "1007", "1008", "1009"]
    assert len(_ids(build_ranking_filter(include_inactive=True))) == 9
    assert _ids(build_ranking_filter(gender="F", federation="ind")) == ["1004", "1005"]


def test_name_filter_is_case_insensitive_and_literal():
    assert _ids(build_name_filter("SHA")) == ["1001", "1005", "1007", "1009"]
    assert _ids(build_name_filter(".*")) == []


@pytest.mark.parametrize("name", [None, "", "  "])
def test_name_filter_requires_name(name):
    with pytest.raises(InvalidParameter) as excinfo:
        build_name_filter(name)
    assert excinfo.value.message == "Search name is required"


def test_federation_filter_requires_code():
    with pytest.raises(InvalidParameter):
        build_federation_filter("  ")
    assert _ids(build_federation_filter("ind", "M")) == ["1006"]


def test_age_group_filter_uses_birth_year_window():
    descriptor = age_group_range("U12", 2025)

    assert _ids(build_age_group_filter(descriptor)) == ["1004", "1005", "1009"]
    assert _ids(build_age_group_filter(descriptor, "M")) == []


def test_title_filter_matches_any_title_set():
    assert _ids(build_title_filter(("IA", "FA", "NA"))) == ["1003", "1006"]


def test_where_overwrites_and_merge_conjoins():
    first = MATCH_ALL.where("gender", Equals("M")).where("gender", Equals("F"))
    assert first.clauses == (("gender", Equals("F")),)

    merged = first.merge(MATCH_ALL.where("federation", Equals("NEP")))
    assert _ids(merged) == ["1002", "1009"]


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        MATCH_ALL.where("rating", Equals(1))


def test_range_over_birth_year_is_numeric():
    record = make_player("1", birth_year="2010")
    assert matches(record, MATCH_ALL.where("birth_year", Range(gte=2007, lte=2025)))
    assert not matches(make_player("2"), MATCH_ALL.where("birth_year", Range(gte=0)))


def test_unknown_predicate_kind_is_a_type_error():
    with pytest.raises(TypeError):
        predicate_matches("x", object(), is_set=False)  # type: ignore[arg-type]
    assert predicate_matches("Aarav", Contains("AAR"), is_set=False)
