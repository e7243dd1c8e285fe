"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "PYFIDE_DB_PATH"
_FACET_WORKERS_ENV = "PYFIDE_FACET_WORKERS"
_ENVIRONMENT_ENV = "PYFIDE_ENV"

_FACET_WORKERS_DEFAULT = 4
_DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / "pyfide.sqlite"


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: Path | str
    facet_workers: int
    environment: str

    @property
    def expose_errors(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        raw_path = os.getenv(_DB_PATH_ENV)
        db_path: Path | str
        if raw_path and raw_path.startswith("file:"):
            db_path = raw_path
        elif raw_path:
            db_path = Path(raw_path)
        else:
            db_path = _DEFAULT_DB_PATH
        return cls(
            db_path=db_path,
            facet_workers=_env_int(_FACET_WORKERS_ENV, _FACET_WORKERS_DEFAULT, min_value=1),
            environment=os.getenv(_ENVIRONMENT_ENV, "production").strip().lower(),
        )
