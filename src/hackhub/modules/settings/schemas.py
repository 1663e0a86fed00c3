"""Event settings schemas."""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, EmailStr, Field, model_validator


class EventSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    registration_enabled: bool
    submission_enabled: bool
    submission_deadline: datetime | None
    orientation_link: str | None
    event_start_date: datetime | None
    event_end_date: datetime | None
    enable_emails: bool
    from_email: str | None


class EventSettingsUpdate(BaseModel):
    """Partial update. Omitted fields keep their stored value."""

    registration_enabled: bool | None = None
    submission_enabled: bool | None = None
    submission_deadline: AwareDatetime | None = None
    orientation_link: str | None = Field(None, max_length=500)
    event_start_date: AwareDatetime | None = None
    event_end_date: AwareDatetime | None = None
    enable_emails: bool | None = None
    from_email: EmailStr | None = None

    @model_validator(mode="after")
    def validate_event_window(self):
        if (
            self.event_start_date is not None
            and self.event_end_date is not None
            and self.event_end_date <= self.event_start_date
        ):
            raise ValueError("event_end_date must be after event_start_date")
        return self


class EmailSettingsResponse(BaseModel):
    enable_emails: bool
    from_email: str | None


class EmailSettingsUpdate(BaseModel):
    enable_emails: bool | None = None
    from_email: EmailStr | None = None


class SendTestEmailRequest(BaseModel):
    """Recipient for a test email; defaults to the signed-in staff member."""

    to: EmailStr | None = None


class MessageResponse(BaseModel):
    message: str
