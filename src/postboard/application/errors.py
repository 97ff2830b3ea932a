"""Typed application errors carrying an HTTP status code and a user-facing message."""

from __future__ import annotations


class ApiError(Exception):
    """Expected failure that crosses into the transport layer unchanged."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    """Missing or invalid input."""

    status_code = 400


class UnauthorizedError(ApiError):
    """Bad credentials, bad or expired token, or failed re-verification."""

    status_code = 401


class ForbiddenError(ApiError):
    """Authenticated caller is not allowed to act on the resource."""

    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class InternalError(ApiError):
    """Unexpected failure such as unavailable storage or signing misconfiguration."""

    status_code = 500
