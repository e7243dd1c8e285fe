"""Pure record classifiers (age groups, age buckets, title categories)."""

from .age import (
    AGE_BUCKETS,
    AGE_GROUP_CODES,
    AgeBucket,
    AgeGroupDescriptor,
    age_group_range,
    all_age_groups,
    bucket_for_age,
    derive_age,
)
from .titles import (
    ARBITER_CODES,
    COMPETITIVE_CODES,
    TRAINER_CODES,
    TitleCategory,
    TitleProfile,
    classify_titles,
    primary_title,
    resolve_title_category,
)

__all__ = [
    "AGE_BUCKETS",
    "AGE_GROUP_CODES",
    "ARBITER_CODES",
    "COMPETITIVE_CODES",
    "TRAINER_CODES",
    "AgeBucket",
    "AgeGroupDescriptor",
    "TitleCategory",
    "TitleProfile",
    "age_group_range",
    "all_age_groups",
    "bucket_for_age",
    "classify_titles",
    "derive_age",
    "primary_title",
    "resolve_title_category",
]
