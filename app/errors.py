"""Structured errors for the list/segment layer and their API response shape."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.details = details
        self.payload = build_error_payload(self.code, message, details)


class NotAuthenticated(AppError):
    """No valid session, or the session does not map to an application user."""

    status_code = 401
    code = "not_authenticated"


class TenantResolutionFailed(AppError):
    """Caller has no usable customer scope for the operation."""

    status_code = 403
    code = "tenant_resolution_failed"


class ValidationError(AppError):
    status_code = 422
    code = "validation_error"


class NotFound(AppError):
    """Row is absent or invisible under the current customer scope."""

    status_code = 404
    code = "not_found"


class UnsupportedOperation(AppError):
    status_code = 400
    code = "unsupported_operation"


class Conflict(AppError):
    status_code = 409
    code = "conflict"


class StorageError(AppError):
    """Underlying database failure, carrying the driver's message."""

    status_code = 500
    code = "storage_error"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.payload, headers=headers)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise database failures inside the block as StorageError."""
    try:
        yield
    except SQLAlchemyError as exc:
        reason = getattr(exc, "orig", None) or exc
        raise StorageError(f"Failed to {action}: {reason}") from exc
