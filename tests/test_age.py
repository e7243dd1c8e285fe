import pytest

from pyfide.classify.age import (
    AGE_BUCKETS,
    AGE_GROUP_CODES,
    age_group_range,
    all_age_groups,
    bucket_for_age,
    derive_age,
)
from pyfide.errors import InvalidParameter


def test_youth_window_includes_reference_year():
    descriptor = age_group_range("U18", 2025)

    assert (descriptor.min_birth_year, descriptor.max_birth_year) == (2007, 2025)
    assert descriptor.contains(2010)
    assert derive_age("2010", 2025) == 15


@pytest.mark.parametrize(
    "code, window",
    [
        ("S20", (1996, 2005)),
        ("S40", (1976, 1985)),
        ("S50", (1966, 1975)),
        ("S60", (1956, 1965)),
        ("S70", (1946, 1955)),
    ],
)
def test_senior_windows_are_ten_years(code, window):
    descriptor = age_group_range(code, 2025)
    assert (descriptor.min_birth_year, descriptor.max_birth_year) == window


def test_code_is_normalised():
    assert age_group_range(" u12 ", 2025).code == "U12"


@pytest.mark.parametrize("code", ["U20", "S80", "", "junior"])
def test_unknown_code_rejected(code):
    with pytest.raises(InvalidParameter) as excinfo:
        age_group_range(code, 2025)
    assert excinfo.value.param == "groupCode"
    assert "Allowed" in excinfo.value.message


def test_classification_is_stable():
    first = all_age_groups(2025)
    second = all_age_groups(2025)

    assert first == second
    assert [descriptor.code for descriptor in first] == list(AGE_GROUP_CODES)
    assert len(first) == 11


@pytest.mark.parametrize("birth_year", [None, "", "abcd"])
def test_derive_age_unknown(birth_year):
    assert derive_age(birth_year, 2025) is None


@pytest.mark.parametrize(
    "age, label",
    [
        (0, "U-8"),
        (7, "U-8"),
        (8, "U-10"),
        (19, "U-20"),
        (20, "U-21"),
        (21, "Junior"),
        (35, "Adult"),
        (79, "Senior-70+"),
        (80, "Senior-80+"),
        (119, "Senior-80+"),
    ],
)
def test_bucket_for_age(age, label):
    assert bucket_for_age(age).group_label == label


@pytest.mark.parametrize("age", [None, -1, 120, 150])
def test_bucket_out_of_range(age):
    assert bucket_for_age(age) is None


def test_buckets_are_contiguous():
    for current, following in zip(AGE_BUCKETS, AGE_BUCKETS[1:]):
        assert current.upper == following.lower
    assert AGE_BUCKETS[0].lower == 0
    assert AGE_BUCKETS[-1].range_label == "80+ years"
