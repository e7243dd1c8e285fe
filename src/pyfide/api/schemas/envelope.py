from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from pyfide.models.player import CamelModel
from pyfide.models.reports import PaginationEnvelope


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SuccessEnvelope(CamelModel):
    """``{success, data, pagination?, timestamp}`` plus call-site extras."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    success: bool = True
    data: Any = None
    pagination: Optional[PaginationEnvelope] = None
    timestamp: str = Field(default_factory=utc_timestamp)

    def render(self) -> Dict[str, Any]:
        exclude = {"pagination"} if self.pagination is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class ErrorBody(CamelModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorEnvelope(CamelModel):
    success: bool = False
    error: ErrorBody
    timestamp: str = Field(default_factory=utc_timestamp)

    def render(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
