"""
Event Settings Router

Admin only (declared where the routers are mounted).

Endpoints:
- GET /settings - Event dates and switches
- PUT /settings - Partial update of event settings
- GET /admin/email-settings - Email switch and sender address
- PUT /admin/email-settings - Update email settings
- POST /admin/test-email - Send a test email
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.settings import service
from hackhub.modules.settings.schemas import (
    EmailSettingsResponse,
    EmailSettingsUpdate,
    EventSettingsResponse,
    EventSettingsUpdate,
    MessageResponse,
    SendTestEmailRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()
email_router = APIRouter()


@router.get("", response_model=EventSettingsResponse)
async def get_settings(
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> EventSettingsResponse:
    try:
        return await service.get_event_settings(db, cache)
    except Exception:
        raise_internal_error("load event settings")


@router.put("", response_model=EventSettingsResponse)
async def update_settings(
    body: EventSettingsUpdate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> EventSettingsResponse:
    try:
        updated = await service.update_event_settings(db, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update event settings")

    logger.info(f"Event settings updated by {staff.email}")
    return updated


@email_router.get("/email-settings", response_model=EmailSettingsResponse)
async def get_email_settings(
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> EmailSettingsResponse:
    try:
        return await service.get_email_settings(db, cache)
    except Exception:
        raise_internal_error("load email settings")


@email_router.put("/email-settings", response_model=EmailSettingsResponse)
async def update_email_settings(
    body: EmailSettingsUpdate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> EmailSettingsResponse:
    try:
        updated = await service.update_email_settings(db, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update email settings")

    logger.info(f"Email settings updated by {staff.email}")
    return updated


@email_router.post("/test-email", response_model=MessageResponse)
async def send_test_email(
    body: SendTestEmailRequest,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> MessageResponse:
    """
    Send a test email to ``to``, or to the caller when omitted.

    Raises:
        HTTPException 400: Email is switched off
        HTTPException 500: The provider rejected the message
    """
    try:
        message = await service.send_test_email(db, cache, body.to or staff.email)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("send the test email")
    return MessageResponse(message=message)
