"""
Shared fixtures for HackHub tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

# Register every mapped class before any model is configured
from hackhub.modules.applicant_auth import models as _applicant_auth_models  # noqa: F401
from hackhub.modules.applicants.models import Applicant, ApplicantStatus
from hackhub.modules.competitions.models import CompetitionRound, RoundStatus
from hackhub.modules.notifications import models as _notification_models  # noqa: F401
from hackhub.modules.settings import models as _settings_models  # noqa: F401
from hackhub.modules.submissions import models as _submission_models  # noqa: F401
from hackhub.modules.users import models as _user_models  # noqa: F401

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


def make_applicant(status: ApplicantStatus = ApplicantStatus.REGISTERED, **overrides):
    applicant = MagicMock(spec=Applicant)
    applicant.id = uuid4()
    applicant.registration_id = "HKT2026000123"
    applicant.name = "Ada Lovelace"
    applicant.email = "ada@example.com"
    applicant.mobile = "+15550001111"
    applicant.student_id = "S-42"
    applicant.course = "Computer Science"
    applicant.year_of_graduation = "2027"
    applicant.college_name = "Analytical College"
    applicant.linkedin_profile = None
    applicant.status = status
    applicant.selected_by = None
    applicant.selected_at = None
    applicant.confirmed_at = None
    applicant.notes = None
    applicant.created_at = NOW - timedelta(days=3)
    applicant.updated_at = NOW - timedelta(days=3)
    for key, value in overrides.items():
        setattr(applicant, key, value)
    return applicant


def make_round(
    name: str,
    status: RoundStatus = RoundStatus.ACTIVE,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
    requirements: list | None = None,
):
    round_ = MagicMock(spec=CompetitionRound)
    round_.id = uuid4()
    round_.name = name
    round_.description = f"{name} description"
    round_.status = status
    round_.start_time = start_time
    round_.end_time = end_time
    round_.max_participants = None
    round_.requirements = requirements
    round_.prizes = None
    round_.created_at = NOW - timedelta(days=10)
    return round_


@pytest.fixture
def applicant():
    return make_applicant()


@pytest.fixture
def selected_applicant():
    return make_applicant(ApplicantStatus.SELECTED, selected_at=NOW - timedelta(days=1))


@pytest.fixture
def round_factory():
    return make_round


@pytest.fixture
def applicant_factory():
    return make_applicant
