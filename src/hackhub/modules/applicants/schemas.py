"""
Applicant Schemas

Request and response models for registration, the applicant profile and
admin applicant management.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from hackhub.modules.applicants.models import ApplicantStatus


class ApplicantBase(BaseModel):
    """Fields supplied at registration."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    mobile: str = Field(..., min_length=5, max_length=20)
    student_id: str = Field(..., min_length=1, max_length=100)
    course: str = Field(..., min_length=1, max_length=200)
    year_of_graduation: str = Field(..., min_length=4, max_length=10)
    college_name: str = Field(..., min_length=1, max_length=300)
    linkedin_profile: str | None = Field(None, max_length=500)

    @field_validator("name", "mobile", "student_id", "course", "college_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ApplicantRegister(ApplicantBase):
    """Public registration request."""


class ApplicantCreate(ApplicantBase):
    """Admin-created applicant."""

    status: ApplicantStatus = ApplicantStatus.REGISTERED
    notes: str | None = None


class ApplicantUpdate(BaseModel):
    """Partial admin update; omitted fields stay unchanged."""

    name: str | None = Field(None, min_length=1, max_length=200)
    email: EmailStr | None = None
    mobile: str | None = Field(None, min_length=5, max_length=20)
    student_id: str | None = Field(None, min_length=1, max_length=100)
    course: str | None = Field(None, min_length=1, max_length=200)
    year_of_graduation: str | None = Field(None, min_length=4, max_length=10)
    college_name: str | None = Field(None, min_length=1, max_length=300)
    linkedin_profile: str | None = Field(None, max_length=500)
    status: ApplicantStatus | None = None
    notes: str | None = None


class ApplicantResponse(BaseModel):
    """Applicant as seen by the applicant and by staff."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    registration_id: str
    name: str
    email: str
    mobile: str
    student_id: str
    course: str
    year_of_graduation: str
    college_name: str
    linkedin_profile: str | None
    status: ApplicantStatus
    selected_at: datetime | None
    confirmed_at: datetime | None
    created_at: datetime


class ApplicantAdminResponse(ApplicantResponse):
    """Applicant with staff-only fields."""

    selected_by: UUID | None
    notes: str | None
    updated_at: datetime


class ApplicantListResponse(BaseModel):
    items: list[ApplicantAdminResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ProgressEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    stage: str
    status: str
    description: str | None
    completed_at: datetime | None
    created_at: datetime


class RegistrationResponse(BaseModel):
    message: str
    applicant: ApplicantResponse


class ConfirmParticipationRequest(BaseModel):
    """Public confirmation by registration ID (link from the selection email)."""

    registration_id: str = Field(..., min_length=1, max_length=20)


class ConfirmParticipationResponse(BaseModel):
    message: str
    applicant: ApplicantResponse


class BulkStatusUpdateRequest(BaseModel):
    registration_ids: list[str] = Field(..., min_length=1, max_length=1000)
    status: ApplicantStatus


class BulkStatusUpdateResponse(BaseModel):
    updated: list[str]
    not_found: list[str]
    invalid_transition: list[str]


class NotificationRequest(BaseModel):
    applicant_ids: list[UUID] = Field(..., min_length=1, max_length=1000)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=10000)


class NotificationResult(BaseModel):
    applicant_id: UUID
    email: str | None
    success: bool
    error: str | None = None


class NotificationSummary(BaseModel):
    total: int
    sent: int
    failed: int


class NotificationResponse(BaseModel):
    message: str
    results: list[NotificationResult]
    summary: NotificationSummary


class MessageResponse(BaseModel):
    message: str
