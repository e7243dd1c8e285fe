"""Configuration helpers for disciplines and runtime settings."""

from .disciplines import (
    DEFAULT_DISCIPLINE,
    Discipline,
    get_discipline,
    iter_disciplines,
    require_discipline,
    resolve_discipline,
)
from .settings import Settings

__all__ = [
    "DEFAULT_DISCIPLINE",
    "Discipline",
    "Settings",
    "get_discipline",
    "iter_disciplines",
    "require_discipline",
    "resolve_discipline",
]
