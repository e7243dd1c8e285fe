import pytest

from pyfide.errors import InvalidParameter, NotFound
from pyfide.query import SearchParams
from pyfide.service import PlayerCatalog
from pyfide.store import InMemoryPlayerStore

from tests.factories import fixed_clock, numbered_population, sample_population


class _UntouchableStore:
    """Fails the test if any store call is issued."""

    def __getattr__(self, name):
        raise AssertionError(f"store.{name} must not be called for invalid input")


@pytest.fixture
def catalog() -> PlayerCatalog:
    return PlayerCatalog(InMemoryPlayerStore(sample_population()), clock=fixed_clock, facet_workers=2)


@pytest.fixture
def guarded() -> PlayerCatalog:
    return PlayerCatalog(_UntouchableStore(), clock=fixed_clock)


def test_get_player(catalog):
    assert catalog.get_player(" 1007 ").name == "Gopal Shah"


def test_get_player_not_found(catalog):
    with pytest.raises(NotFound) as excinfo:
        catalog.get_player("42")
    assert excinfo.value.message == "Player with ID 42 not found"


def test_search_by_fide_id(catalog):
    assert catalog.search_by_fide_id("1002").gender == "F"
    with pytest.raises(NotFound) as excinfo:
        catalog.search_by_fide_id("999")
    assert excinfo.value.message == "No player found with FIDE ID 999"


def test_search_by_name_pages_in_name_order(catalog):
    first = catalog.search_by_name("sha", page="0", size="2")
    second = catalog.search_by_name("sha", page="1", size="2")

    assert [p.name for p in first.data] == ["Aarav Sharma", "Esha Karki"]
    assert [p.name for p in second.data] == ["Gopal Shah", "Isha Joshi"]
    assert first.pagination.total_items == 4
    assert first.pagination.has_next is True
    assert second.pagination.has_next is False


def test_advanced_search(catalog):
    result = catalog.advanced_search(SearchParams(federation="nep", min_rating="2000"))

    assert [p.name for p in result.data] == ["Aarav Sharma", "Bina Thapa", "Gopal Shah"]
    assert result.pagination.total_items == 3


def test_players_by_federation_sorted_by_rapid(catalog):
    result = catalog.players_by_federation("ind", sort_by="rapid")

    assert result.federation == "IND"
    assert [p.id for p in result.data] == ["1005", "1006", "1004"]


def test_players_by_federation_unknown_sort_falls_back_to_standard(catalog):
    result = catalog.players_by_federation("IND", sort_by="bullet")
    assert [p.id for p in result.data] == ["1005", "1004", "1006"]


def test_standard_rankings(catalog):
    result = catalog.rankings("standard", page="1", size="2")

    assert [(p.id, p.rank) for p in result.data] == [("1002", 3), ("1005", 4)]
    assert result.pagination.total_items == 7
    assert result.pagination.total_pages == 4


def test_rankings_include_inactive_and_filters(catalog):
    everyone = catalog.rankings("rapid", include_inactive=True, size="100")
    women = catalog.rankings("blitz", gender="F", federation="nep")

    assert everyone.pagination.total_items == 9
    assert everyone.data[0].id == "1001"
    assert [p.id for p in women.data] == ["1009", "1002"]


def test_last_partial_page_ranks():
    catalog = PlayerCatalog(InMemoryPlayerStore(numbered_population(45)), clock=fixed_clock)
    result = catalog.rankings("standard", page="2", size="20")

    assert [p.rank for p in result.data] == [41, 42, 43, 44, 45]
    assert result.pagination.has_next is False


def test_age_group_rankings(catalog):
    result = catalog.rankings_by_age_group("u12")

    assert result.group_code == "U12"
    assert [(p.id, p.age, p.rank) for p in result.data] == [("1005", 12, 1), ("1004", 10, 2), ("1009", 8, 3)]


def test_age_group_rankings_include_inactive_players(catalog):
    result = catalog.rankings_by_age_group("S50")
    assert [p.id for p in result.data] == ["1003"]


def test_age_group_rankings_fall_back_to_standard(catalog):
    result = catalog.rankings_by_age_group("U12", rating_type="classical")
    assert result.data[0].id == "1005"


def test_player_stats_uses_the_clock(catalog):
    report = catalog.player_stats()

    assert report.total_players == 7
    assert report.age_group_distribution[0].age_group == "U-10"


def test_age_group_stats_single_and_all(catalog):
    single = catalog.age_group_stats("U12")
    everything = catalog.age_group_stats(None, rating_type="rapid")

    assert single.age_group == "U12"
    assert len(everything) == 11
    assert catalog.age_group_stats("  ")[0].age_group == "U8"


def test_title_listing_and_summary(catalog):
    listing = catalog.players_by_title_type(" GM ")

    assert listing.title_type == "GM"
    assert [p.id for p in listing.players] == ["1001"]
    assert listing.breakdown is None
    assert catalog.title_summary().summary.total_titled_players == 6


@pytest.mark.parametrize(
    "call, param",
    [
        (lambda c: c.get_player("  "), "id"),
        (lambda c: c.search_by_fide_id(None), "id"),
        (lambda c: c.search_by_name(""), "name"),
        (lambda c: c.advanced_search(SearchParams(gender="X")), "gender"),
        (lambda c: c.advanced_search(SearchParams(min_rating="abc")), "minRating"),
        (lambda c: c.players_by_federation(" "), "federation"),
        (lambda c: c.rankings("standard", gender="male"), "gender"),
        (lambda c: c.rankings_by_age_group("U9"), "groupCode"),
        (lambda c: c.age_group_stats("U30"), "groupCode"),
        (lambda c: c.age_group_stats("U12", rating_type="bullet"), "ratingType"),
        (lambda c: c.age_group_stats(None, gender="Q"), "gender"),
        (lambda c: c.players_by_title_type(""), "type"),
    ],
)
def test_invalid_input_never_reaches_the_store(guarded, call, param):
    with pytest.raises(InvalidParameter) as excinfo:
        call(guarded)
    assert excinfo.value.param == param


def test_fide_id_required_message(guarded):
    with pytest.raises(InvalidParameter) as excinfo:
        guarded.search_by_fide_id(" ")
    assert excinfo.value.message == "FIDE ID query parameter is required"
