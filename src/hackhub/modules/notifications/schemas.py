"""Saved notification schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hackhub.modules.notifications.models import NotificationStatus


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=10000)
    to_emails: list[EmailStr] = Field(..., min_length=1, max_length=1000)
    cc_emails: list[EmailStr] = Field(default_factory=list, max_length=50)


class NotificationUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    subject: str | None = Field(None, min_length=1, max_length=200)
    message: str | None = Field(None, min_length=1, max_length=10000)
    to_emails: list[EmailStr] | None = Field(None, min_length=1, max_length=1000)
    cc_emails: list[EmailStr] | None = Field(None, max_length=50)


class SavedNotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    subject: str
    message: str
    to_emails: list[str]
    cc_emails: list[str]
    status: NotificationStatus
    sent_at: datetime | None
    sent_count: int
    failed_count: int
    error_message: str | None
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime


class SavedNotificationListResponse(BaseModel):
    notifications: list[SavedNotificationResponse]


class SendOutcome(BaseModel):
    message: str
    sent_count: int
    failed_count: int
    errors: list[str]
    notification: SavedNotificationResponse
