"""Canonical player record shared by the stores, the engine and the API."""

from __future__ import annotations

from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


Gender = Literal["M", "F"]

ACTIVE_FLAGS: Tuple[Optional[str], ...] = (None, "", "w")
INACTIVE_FLAGS: Tuple[str, ...] = ("i", "wi")

TITLE_SET_FIELDS = ("titles", "women_titles", "other_titles", "additional_designations")


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayerRecord(CamelModel):
    """One catalog entry, immutable for the lifetime of a request."""

    id: str = Field(..., min_length=1)
    name: str
    federation: str = Field(..., min_length=2, max_length=3)
    gender: Gender
    titles: Tuple[str, ...] = ()
    women_titles: Tuple[str, ...] = ()
    other_titles: Tuple[str, ...] = ()
    additional_designations: Tuple[str, ...] = ()
    standard_rating: int = Field(default=0, ge=0)
    rapid_rating: int = Field(default=0, ge=0)
    blitz_rating: int = Field(default=0, ge=0)
    standard_games: int = Field(default=0, ge=0)
    rapid_games: int = Field(default=0, ge=0)
    blitz_games: int = Field(default=0, ge=0)
    standard_k: int = Field(default=0, ge=0)
    rapid_k: int = Field(default=0, ge=0)
    blitz_k: int = Field(default=0, ge=0)
    birth_year: Optional[str] = None
    activity_flag: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("id", "name", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("federation", mode="before")
    @classmethod
    def _upper_federation(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator(*TITLE_SET_FIELDS, mode="before")
    @classmethod
    def _dedupe_codes(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split()
        seen: list[str] = []
        for code in value:
            code = str(code).strip()
            if code and code not in seen:
                seen.append(code)
        return tuple(seen)

    @field_validator("birth_year", mode="before")
    @classmethod
    def _normalize_birth_year(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        if not text or text == "0000":
            return None
        if len(text) != 4 or not text.isdigit():
            raise ValueError(f"birth year must be a four-digit year, got {value!r}")
        return text

    @field_validator("activity_flag", mode="before")
    @classmethod
    def _check_flag(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        if text not in ("", "w", "i", "wi"):
            raise ValueError(f"unknown activity flag {value!r}")
        return text

    @property
    def is_active(self) -> bool:
        return self.activity_flag in ACTIVE_FLAGS

    @property
    def activity_status(self) -> str:
        return "active" if self.is_active else "inactive"

    @property
    def birth_year_value(self) -> Optional[int]:
        return int(self.birth_year) if self.birth_year else None

    def rating(self, discipline: str) -> int:
        return int(getattr(self, f"{discipline}_rating"))
