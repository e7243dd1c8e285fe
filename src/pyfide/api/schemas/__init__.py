"""Pydantic models for API I/O."""

from .envelope import ErrorBody, ErrorEnvelope, SuccessEnvelope, utc_timestamp

__all__ = [
    "ErrorBody",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "utc_timestamp",
]
