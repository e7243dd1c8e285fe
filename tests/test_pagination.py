import pytest

from pyfide.query import PageRequest, assign_ranks, build_envelope, normalize_pagination

from tests.factories import numbered_population


def test_defaults():
    assert normalize_pagination() == PageRequest(page=0, size=20)


@pytest.mark.parametrize("size", ["0", "-5", "101", "abc", 0, 500])
def test_out_of_range_sizes_are_clamped(size):
    request = normalize_pagination(0, size)
    assert 1 <= request.size <= 100


@pytest.mark.parametrize("size, expected", [("0", 1), ("-5", 1), ("101", 100), ("abc", 20)])
def test_size_clamp_values(size, expected):
    assert normalize_pagination(None, size).size == expected


@pytest.mark.parametrize("size", ["1", "100"])
def test_boundary_sizes_pass_through(size):
    assert normalize_pagination(None, size).size == int(size)


@pytest.mark.parametrize("page, expected", [("-3", 0), ("x", 0), ("4", 4), (None, 0)])
def test_page_normalisation(page, expected):
    assert normalize_pagination(page, None).page == expected


def test_store_addressing_is_one_indexed():
    request = normalize_pagination("2", "20")
    assert request.store_page == 3
    assert request.skip == 40
    assert request.limit == 20


@pytest.mark.parametrize("total", [0, 1, 19, 20, 21, 45, 100])
@pytest.mark.parametrize("page, size", [(0, 1), (0, 20), (1, 20), (2, 20), (3, 7)])
def test_envelope_invariants(total, page, size):
    request = PageRequest(page=page, size=size)
    envelope = build_envelope(request, total)

    assert envelope.total_pages == -(-total // size)
    assert envelope.has_next == ((page + 1) * size < total)
    assert envelope.has_previous == (page > 0)


def test_last_partial_page_is_ranked_41_to_45():
    population = numbered_population(45)
    request = normalize_pagination("2", "20")
    envelope = build_envelope(request, len(population))
    ranked = assign_ranks(population[request.skip : request.skip + request.limit], request)

    assert envelope.total_pages == 3
    assert envelope.has_next is False
    assert envelope.has_previous is True
    assert [player.rank for player in ranked] == [41, 42, 43, 44, 45]


def test_envelope_serialises_camel_case():
    envelope = build_envelope(PageRequest(page=0, size=20), 3)
    assert envelope.model_dump(by_alias=True) == {
        "page": 0,
        "size": 20,
        "totalItems": 3,
        "totalPages": 1,
        "hasNext": False,
        "hasPrevious": False,
    }
