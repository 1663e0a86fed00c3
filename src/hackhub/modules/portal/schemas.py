"""Applicant portal response schemas."""

from pydantic import BaseModel

from hackhub.modules.applicants.models import ApplicantStatus
from hackhub.modules.applicants.schemas import ApplicantResponse, ProgressEntryResponse
from hackhub.modules.competitions.schemas import RoundResponse
from hackhub.modules.submissions.schemas import SubmissionResponse


class DashboardResponse(BaseModel):
    """Everything the applicant portal home page shows."""

    applicant: ApplicantResponse
    progress: list[ProgressEntryResponse]
    active_rounds: list[RoundResponse]
    submissions: list[SubmissionResponse]
    current_status: ApplicantStatus
    requires_confirmation: bool
