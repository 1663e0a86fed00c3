"""
Saved Notification Router

Admin only (declared where the router is mounted). Shares the
``/admin/notifications`` prefix with the one-off applicant broadcast.

Endpoints:
- GET /admin/notifications - List saved notifications
- POST /admin/notifications - Save a draft
- GET /admin/notifications/{id} - Notification detail
- PUT /admin/notifications/{id} - Edit an unsent notification
- DELETE /admin/notifications/{id} - Delete a notification
- POST /admin/notifications/{id}/send - Send to every recipient
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.notifications import service
from hackhub.modules.notifications.schemas import (
    NotificationCreate,
    NotificationUpdate,
    SavedNotificationListResponse,
    SavedNotificationResponse,
    SendOutcome,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SavedNotificationListResponse)
async def list_notifications(db: AsyncSession = Depends(get_db)) -> SavedNotificationListResponse:
    notifications = await service.list_notifications(db)
    return SavedNotificationListResponse(
        notifications=[SavedNotificationResponse.model_validate(n) for n in notifications]
    )


@router.post("", response_model=SavedNotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: NotificationCreate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> SavedNotificationResponse:
    try:
        notification = await service.create_notification(db, body, staff)
    except Exception:
        raise_internal_error("save the notification")
    return SavedNotificationResponse.model_validate(notification)


@router.get("/{notification_id}", response_model=SavedNotificationResponse)
async def get_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> SavedNotificationResponse:
    try:
        notification = await service.get_notification(db, notification_id)
    except ServiceError as e:
        raise_http_error(e)
    return SavedNotificationResponse.model_validate(notification)


@router.put("/{notification_id}", response_model=SavedNotificationResponse)
async def update_notification(
    notification_id: UUID,
    body: NotificationUpdate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> SavedNotificationResponse:
    try:
        notification = await service.update_notification(db, notification_id, body)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update the notification")

    logger.info(f"Notification {notification_id} updated by {staff.email}")
    return SavedNotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_notification(db, notification_id)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("delete the notification")

    logger.info(f"Notification {notification_id} deleted by {staff.email}")


@router.post("/{notification_id}/send", response_model=SendOutcome)
async def send_notification(
    notification_id: UUID,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> SendOutcome:
    logger.info(f"{staff.email} sending saved notification {notification_id}")
    try:
        return await service.send_saved_notification(db, notification_id, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("send the notification")
