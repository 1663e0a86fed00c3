"""
Staff Authentication Router

Endpoints:
- POST /auth/login - Exchange email/password for JWT tokens
- POST /auth/refresh - Exchange a refresh token for a new token pair
- GET /auth/me - Current staff account
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.database import get_db
from hackhub.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from hackhub.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    StaffUserResponse,
    TokenResponse,
)
from hackhub.modules.users.models import User
from hackhub.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": "INVALID_CREDENTIALS",
            "message": "Invalid email or password.",
        },
    )


def _issue_tokens(user: User) -> TokenResponse:
    additional_claims = {
        "email": user.email,
        "role": user.role.value,
        "name": user.full_name,
    }
    return TokenResponse(
        access_token=create_access_token(
            subject=str(user.id),
            additional_claims=additional_claims,
        ),
        refresh_token=create_refresh_token(subject=str(user.id)),
    )


def _ensure_active(user: User) -> None:
    if not user.is_active:
        logger.warning(f"Login attempt for inactive account: {user.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ACCOUNT_INACTIVE",
                "message": "Your account has been deactivated.",
            },
        )


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate a staff member and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive
    """
    user = await UserRepository.get_by_email(db, credentials.email)

    if not user:
        logger.warning(f"Login attempt for non-existent email: {credentials.email}")
        raise _invalid_credentials()

    if not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Invalid password for user: {credentials.email}")
        raise _invalid_credentials()

    _ensure_active(user)

    tokens = _issue_tokens(user)
    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return LoginResponse(
        **tokens.model_dump(),
        user=StaffUserResponse.model_validate(user),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """Issue a fresh token pair from a valid refresh token."""
    payload = decode_token(body.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "INVALID_TOKEN",
                "message": "Invalid or expired refresh token.",
            },
        )

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError as e:
        raise _invalid_credentials() from e

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise _invalid_credentials()

    _ensure_active(user)
    return _issue_tokens(user)


@router.get("/me", response_model=StaffUserResponse)
async def me(
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> StaffUserResponse:
    user = await UserRepository.get_by_id(db, staff.id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "USER_NOT_FOUND", "message": "User not found."},
        )
    return StaffUserResponse.model_validate(user)
