"""
Service Errors

Base exception hierarchy shared by all service layers. Routers convert
these into ``HTTPException`` responses with a ``{"error", "message"}``
detail body; anything else becomes a generic 500.
"""

import logging
from typing import NoReturn

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(ServiceError):
    """Request is well formed but not acceptable in the current state."""

    def __init__(self, message: str, error_code: str = "INVALID_REQUEST"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class UnauthenticatedError(ServiceError):
    """Caller could not be authenticated."""

    def __init__(
        self,
        message: str = "Authentication required.",
        error_code: str = "UNAUTHENTICATED",
    ):
        super().__init__(message=message, error_code=error_code, status_code=401)


class ForbiddenError(ServiceError):
    """Caller is authenticated but not allowed to perform the action."""

    def __init__(self, message: str, error_code: str = "FORBIDDEN"):
        super().__init__(message=message, error_code=error_code, status_code=403)


class NotFoundError(ServiceError):
    """Requested entity does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ConflictError(ServiceError):
    """Write would violate a uniqueness rule."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class UpstreamFailureError(ServiceError):
    """An external collaborator (email provider) failed."""

    def __init__(self, message: str, error_code: str = "UPSTREAM_FAILURE"):
        super().__init__(message=message, error_code=error_code, status_code=500)


def raise_http_error(e: ServiceError) -> NoReturn:
    """Convert a service error to an HTTPException."""
    headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
        headers=headers,
    ) from e


def raise_internal_error(action: str) -> NoReturn:
    """
    Log the active exception and raise a generic 500.

    Must be called from inside an ``except`` block.
    """
    logger.exception(f"Unexpected error while trying to {action}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": f"An unexpected error occurred while trying to {action}.",
        },
    )


async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    """Application-wide handler for service errors raised outside routers."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"error": exc.error_code, "message": exc.message}},
    )
