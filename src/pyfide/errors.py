"""Error types raised by the catalog engine and rendered by the API layer."""

from __future__ import annotations

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for errors that map onto a failure envelope."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self, *, expose_details: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if expose_details and self.details:
            payload["details"] = self.details
        return payload


class InvalidParameter(CatalogError):
    """Malformed or out-of-domain request input."""

    code = "INVALID_PARAMETER"
    status_code = 400

    def __init__(self, param: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"parameter": param, **(details or {})})
        self.param = param


class NotFound(CatalogError):
    """No record matches an exact-identity lookup."""

    code = "NOT_FOUND"
    status_code = 404


class StoreFailure(CatalogError):
    """The record store errored or timed out; never retried."""

    code = "STORE_FAILURE"
    status_code = 500
    public_message = "Internal Server Error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)

    def to_payload(self, *, expose_details: bool = True) -> dict[str, Any]:
        if expose_details:
            return super().to_payload(expose_details=True)
        return {"code": self.code, "message": self.public_message}


__all__ = ["CatalogError", "InvalidParameter", "NotFound", "StoreFailure"]
