"""
Applicant Registration Router

Endpoints:
- POST /applicant/register - Register for the hackathon
- POST /applicant/confirm-participation - Confirm attendance (logged in)

The public confirmation link from the selection email is served by
``confirmation_router`` at POST /confirm-participation.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.applicant_auth.dependencies import get_current_applicant
from hackhub.modules.applicants import service
from hackhub.modules.applicants.models import Applicant
from hackhub.modules.applicants.schemas import (
    ApplicantRegister,
    ApplicantResponse,
    ConfirmParticipationRequest,
    ConfirmParticipationResponse,
    RegistrationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
confirmation_router = APIRouter()


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register for the hackathon",
    responses={409: {"description": "Email already registered"}},
)
async def register(
    body: ApplicantRegister,
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> RegistrationResponse:
    """
    Register a new applicant.

    A confirmation email with the registration ID is sent; delivery
    problems do not fail the registration.
    """
    try:
        applicant = await service.register(db, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("register the applicant")

    return RegistrationResponse(
        message="Registration successful",
        applicant=ApplicantResponse.model_validate(applicant),
    )


@router.post("/confirm-participation", response_model=ConfirmParticipationResponse)
async def confirm_participation(
    applicant: Applicant = Depends(get_current_applicant),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> ConfirmParticipationResponse:
    try:
        applicant = await service.confirm_participation(db, applicant, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("confirm participation")

    return ConfirmParticipationResponse(
        message="Participation confirmed successfully",
        applicant=ApplicantResponse.model_validate(applicant),
    )


@confirmation_router.post(
    "/confirm-participation",
    response_model=ConfirmParticipationResponse,
    summary="Confirm participation by registration ID",
)
async def confirm_participation_by_code(
    body: ConfirmParticipationRequest,
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> ConfirmParticipationResponse:
    """Target of the link in the selection email. No login required."""
    try:
        applicant = await service.confirm_by_registration_id(db, body.registration_id, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("confirm participation")

    return ConfirmParticipationResponse(
        message="Participation confirmed successfully",
        applicant=ApplicantResponse.model_validate(applicant),
    )
