"""Admin statistics schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from hackhub.modules.competitions.models import RoundStatus


class DashboardStats(BaseModel):
    total_applicants: int
    applicants_by_status: dict[str, int]
    total_submissions: int
    submissions_by_status: dict[str, int]
    pending_review: int
    reviewed: int
    total_rounds: int
    active_rounds: int


class StageStats(BaseModel):
    stage_id: UUID
    name: str
    status: RoundStatus
    total_submissions: int
    submissions_by_status: dict[str, int]


class StageStatsResponse(BaseModel):
    stages: list[StageStats]


class CacheClearResponse(BaseModel):
    message: str
    cleared: int


class JobListResponse(BaseModel):
    jobs: list[dict[str, Any]]


class ActivityType(str, Enum):
    REGISTRATION = "registration"
    SUBMISSION = "submission"
    SELECTION = "selection"


class ActivityItem(BaseModel):
    """One entry of the admin recent-activity feed."""

    type: ActivityType
    applicant_id: UUID
    applicant_name: str
    action: str
    stage_name: str | None = None
    timestamp: datetime


class RecentActivityResponse(BaseModel):
    activities: list[ActivityItem]
