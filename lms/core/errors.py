# File: lms/core/errors.py

"""
Error taxonomy for the library API and the single JSON error shape every
non-2xx response uses:

    {"timestamp": ..., "status": 404, "error": "Not Found",
     "message": "Book not found with id: 7", "path": "/api/books/7"}

Services raise the ``LibraryError`` subclasses below; the handlers wired in
``lms.main`` turn them into responses with ``error_response``.
"""

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class LibraryError(Exception):
    """Base class for failures that map onto a client-facing HTTP status."""

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    status_code = HTTPStatus.NOT_FOUND


class BusinessRuleError(LibraryError):
    """Validation or business-rule violation (duplicate email, copy counts, ...)."""

    status_code = HTTPStatus.BAD_REQUEST


class AuthenticationError(LibraryError):
    """Login failed. Reported as 400 to match the login contract."""

    status_code = HTTPStatus.BAD_REQUEST


GENERIC_SERVER_ERROR_MESSAGE = "An unexpected error occurred"


def _error_label(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_body(*, status_code: int, message: str, path: str) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": int(status_code),
        "error": _error_label(int(status_code)),
        "message": message,
        "path": path,
    }


def error_response(
    request: Request,
    *,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=int(status_code),
        content=error_body(
            status_code=status_code,
            message=message,
            path=request.url.path,
        ),
        headers=headers,
    )
