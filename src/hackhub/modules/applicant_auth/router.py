"""
Applicant Login Router

Endpoints:
- POST /applicant/send-otp - Email a one-time login code
- POST /applicant/verify-otp - Exchange a code for a session token
- POST /applicant/logout - End the current session

Security:
- Both OTP endpoints are rate limited per identifier
- verify-otp answers every failure with 400 and ``success: false``
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.config import settings
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.core.rate_limit import enforce_rate_limit
from hackhub.modules.applicant_auth import otp, sessions
from hackhub.modules.applicant_auth.dependencies import get_session_token
from hackhub.modules.applicant_auth.schemas import (
    LogoutResponse,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpFailure,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from hackhub.modules.applicants.schemas import ApplicantResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/send-otp",
    response_model=SendOtpResponse,
    summary="Send login code",
    responses={404: {"description": "No applicant with this identifier"}},
)
async def send_otp(
    body: SendOtpRequest,
    db: AsyncSession = Depends(get_db),
) -> SendOtpResponse:
    """Email a 6-digit code to a registered applicant."""
    identifier = otp.normalize_identifier(body.identifier)
    await enforce_rate_limit(
        f"otp:send:{identifier}",
        settings.otp_send_rate_limit,
        settings.otp_send_rate_window_seconds,
    )

    try:
        result = await otp.send_otp(db, identifier, body.purpose)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("send the OTP")

    return SendOtpResponse(
        message=result.message,
        expires_in_minutes=result.expires_in_minutes,
    )


@router.post(
    "/verify-otp",
    response_model=VerifyOtpResponse,
    summary="Verify login code",
    responses={400: {"model": VerifyOtpFailure}},
)
async def verify_otp(
    body: VerifyOtpRequest,
    db: AsyncSession = Depends(get_db),
):
    """Verify a code and return a bearer session token."""
    identifier = otp.normalize_identifier(body.identifier)
    await enforce_rate_limit(
        f"otp:verify:{identifier}",
        settings.otp_verify_rate_limit,
        settings.otp_verify_rate_window_seconds,
    )

    try:
        result = await otp.verify_otp(db, identifier, body.otp, body.purpose)
    except ServiceError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=VerifyOtpFailure(error=e.error_code, message=e.message).model_dump(),
        )
    except Exception:
        raise_internal_error("verify the OTP")

    return VerifyOtpResponse(
        message="Login successful",
        session_token=result.session_token,
        applicant=ApplicantResponse.model_validate(result.applicant),
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> LogoutResponse:
    """End the session. Always succeeds, even for unknown or missing tokens."""
    await sessions.destroy_session(db, token)
    return LogoutResponse(message="Logged out successfully")
