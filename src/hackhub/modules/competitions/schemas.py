"""Competition round schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from hackhub.modules.competitions.models import RoundStatus


class Requirement(BaseModel):
    """A deliverable for a round, optionally with a downloadable template."""

    description: str = Field(..., min_length=1, max_length=1000)
    template: str | None = Field(None, max_length=1000)


class _RoundWindow(BaseModel):
    """Round times must carry a UTC offset."""

    @model_validator(mode="after")
    def validate_window(self):
        start = getattr(self, "start_time", None)
        end = getattr(self, "end_time", None)
        if start is not None and end is not None and end <= start:
            raise ValueError("end_time must be after start_time")
        return self


class RoundCreate(_RoundWindow):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    status: RoundStatus = RoundStatus.UPCOMING
    start_time: AwareDatetime | None = None
    end_time: AwareDatetime | None = None
    max_participants: int | None = Field(None, ge=1)
    requirements: list[Requirement] = Field(default_factory=list)
    prizes: str | None = None


class RoundUpdate(_RoundWindow):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    status: RoundStatus | None = None
    start_time: AwareDatetime | None = None
    end_time: AwareDatetime | None = None
    max_participants: int | None = Field(None, ge=1)
    requirements: list[Requirement] | None = None
    prizes: str | None = None


class RoundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    status: RoundStatus
    start_time: datetime | None
    end_time: datetime | None
    max_participants: int | None
    requirements: list[Requirement] | None
    prizes: str | None
    created_at: datetime


class RoundListResponse(BaseModel):
    rounds: list[RoundResponse]


class StageDocument(BaseModel):
    """A document an applicant is expected to provide for a stage."""

    id: str
    name: str
    description: str
    file_url: str | None
    file_type: str
    is_required: bool = True
    stage_id: UUID


class StageDocumentsResponse(BaseModel):
    documents: list[StageDocument]
