"""
Staff Authentication and Authorization

Provides FastAPI dependencies for admin and jury endpoints. Staff members
authenticate with a JWT access token; routes declare the set of roles they
accept through ``require_roles`` at the router (or route) level, so the
role check runs once per request before the handler is dispatched.

Usage:
    router = APIRouter(dependencies=[Depends(require_roles("admin"))])

    @router.get("/endpoint")
    async def endpoint(staff: StaffUser = Depends(get_current_staff_user)):
        ...
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hackhub.core.security import decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for staff authentication",
)


@dataclass(frozen=True)
class StaffUser:
    """
    Represents an authenticated staff member (admin or jury).

    Populated from JWT claims after token validation.

    Attributes:
        id: User's unique identifier
        email: User's email address
        role: User's role ('admin' or 'jury')
        name: Display name (optional)
    """

    id: UUID
    email: str
    role: str
    name: str | None = None

    def __str__(self) -> str:
        return f"StaffUser(id={self.id}, email={self.email}, role={self.role})"


def _unauthorized(error_code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error_code, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _validate_jwt_token(token: str) -> StaffUser:
    """
    Validate a JWT and extract the staff claims.

    Raises:
        HTTPException 401: If the token is invalid, expired, not an access
            token, or missing required claims
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id_str = payload.get("sub")
        if not user_id_str:
            raise ValueError("Missing 'sub' claim in token")

        return StaffUser(
            id=UUID(user_id_str),
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            name=payload.get("name"),
        )
    except ValueError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_staff_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> StaffUser:
    """
    FastAPI dependency that validates the bearer JWT and returns the staff user.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("NOT_AUTHENTICATED", "Authentication required.")

    return _validate_jwt_token(credentials.credentials)


def require_roles(*roles: str) -> Callable[..., Awaitable[StaffUser]]:
    """
    Build a dependency that admits only staff with one of ``roles``.

    Args:
        *roles: Accepted role values (e.g. "admin", "jury")

    Returns:
        Dependency returning the authenticated StaffUser

    Raises:
        HTTPException 403: If the user's role is not in ``roles``
    """
    allowed = frozenset(str(getattr(role, "value", role)) for role in roles)

    async def _require_roles(
        staff: StaffUser = Depends(get_current_staff_user),
    ) -> StaffUser:
        if staff.role not in allowed:
            logger.warning(
                f"Access denied: User {staff.id} ({staff.email}) has role '{staff.role}', "
                f"requires one of {sorted(allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "INSUFFICIENT_ROLE",
                    "message": "You do not have permission to access this resource.",
                },
            )
        return staff

    return _require_roles


__all__ = [
    "StaffUser",
    "get_current_staff_user",
    "require_roles",
]
