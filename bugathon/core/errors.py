"""
Custom exception hierarchy for the Bugathon scoreboard.

Rule: every error has a machine-readable `code` string so clients (and the
sync result envelope) can branch on it without parsing English messages.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class BugathonException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class TicketSourceError(BugathonException):
    """The ticket source call failed or returned a non-success status."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "TICKET_SOURCE_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url:
            details["url"] = url
        super().__init__(message=message, details=details)


class StoreError(BugathonException):
    """A read or write against the persistence layer failed."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORE_ERROR"

    def __init__(self, operation: str, message: str):
        super().__init__(
            message=f"{operation} failed: {message}",
            details={"operation": operation},
        )


class SyncFailedError(BugathonException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "SYNC_FAILED"

    def __init__(self, stage: str, message: str):
        super().__init__(
            message=f"Sync failed while {stage}: {message}",
            details={"stage": stage},
        )


class SyncInProgressError(BugathonException):
    http_status = status.HTTP_409_CONFLICT
    code = "SYNC_IN_PROGRESS"

    def __init__(self):
        super().__init__(message="A sync is already running in this process.")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def bugathon_exception_handler(request: Request, exc: BugathonException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
