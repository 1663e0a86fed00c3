"""Stage submission schemas."""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from hackhub.modules.submissions.models import SubmissionStatus


class SubmissionDocument(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    url: HttpUrl


class SubmitStageRequest(BaseModel):
    stage_id: UUID
    github_url: HttpUrl | None = None
    documents: list[SubmissionDocument] = Field(default_factory=list, max_length=50)


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    applicant_id: UUID
    stage_id: UUID
    github_url: str | None
    documents: list[dict]
    status: SubmissionStatus
    submitted_at: datetime | None
    reviewed_at: datetime | None
    score: int | None
    feedback: str | None
    created_at: datetime
    updated_at: datetime


class SubmitStageResponse(BaseModel):
    message: str
    submission: SubmissionResponse


class SubmissionListResponse(BaseModel):
    submissions: list[SubmissionResponse]


class ReviewDecision(str, enum.Enum):
    """Outcomes a reviewer may record."""

    REVIEWED = "reviewed"
    SELECTED = "selected"
    REJECTED = "rejected"


class ReviewRequest(BaseModel):
    status: ReviewDecision
    score: int | None = Field(None, ge=0, le=100)
    feedback: str | None = Field(None, max_length=5000)
