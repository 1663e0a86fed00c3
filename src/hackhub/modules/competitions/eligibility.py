"""
Stage Eligibility Engine

Pure functions deciding which competition rounds an applicant may submit
to. Nothing here touches the database: eligibility is a function of
``(applicant status, rounds, now)`` and is recomputed for every dashboard
read and again for every submission write.

Rules:
- A round is *time-open* when its status is ``active``, its start time (if
  any) is not in the future and its end time (if any) is in the future.
- Rounds are ordered by start time (rounds without one last), then name.
- The first time-open round is the *entry round*; anyone who has
  registered may submit to it.
- Every other time-open round is an *advanced round*, open only to
  applicants who were selected.

The entry round is not persisted. If an admin reorders or re-times rounds
mid-competition, which round counts as the entry round can change.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

from hackhub.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from hackhub.modules.applicants.models import ApplicantStatus
from hackhub.modules.competitions.models import CompetitionRound, RoundStatus

ENTRY_ROUND_STATUSES: frozenset[ApplicantStatus] = frozenset(
    {
        ApplicantStatus.REGISTERED,
        ApplicantStatus.SELECTED,
        ApplicantStatus.CONFIRMED,
        ApplicantStatus.SUBMITTED,
    }
)

ADVANCED_ROUND_STATUSES: frozenset[ApplicantStatus] = frozenset(
    {
        ApplicantStatus.SELECTED,
        ApplicantStatus.CONFIRMED,
        ApplicantStatus.SUBMITTED,
    }
)

_NO_START = datetime.max.replace(tzinfo=UTC)


class StageNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="Stage not found", error_code="STAGE_NOT_FOUND")


class StageInactiveError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="This stage is not currently active",
            error_code="STAGE_INACTIVE",
        )


class StageNotStartedError(InvalidRequestError):
    def __init__(self):
        super().__init__(
            message="This stage has not started yet",
            error_code="STAGE_NOT_STARTED",
        )


class StageExpiredError(InvalidRequestError):
    def __init__(self):
        super().__init__(message="This stage has expired", error_code="STAGE_EXPIRED")


class NotEligibleError(ForbiddenError):
    def __init__(self, status: ApplicantStatus, advanced: bool):
        message = (
            f"You are not eligible to submit for this stage. Current status: {status.value}."
        )
        if advanced:
            message += " You must be selected for the hackathon to make submissions."
        super().__init__(message=message, error_code="NOT_ELIGIBLE")
        self.advanced = advanced


def round_sort_key(round_: CompetitionRound) -> tuple[datetime, str]:
    return (round_.start_time or _NO_START, round_.name)


def sort_rounds(rounds: Iterable[CompetitionRound]) -> list[CompetitionRound]:
    """Order rounds by start time (unscheduled last), ties broken by name."""
    return sorted(rounds, key=round_sort_key)


def has_started(round_: CompetitionRound, now: datetime) -> bool:
    return round_.start_time is None or round_.start_time <= now


def has_ended(round_: CompetitionRound, now: datetime) -> bool:
    return round_.end_time is not None and round_.end_time <= now


def is_time_open(round_: CompetitionRound, now: datetime) -> bool:
    """Active, started and not yet ended."""
    return (
        round_.status == RoundStatus.ACTIVE
        and has_started(round_, now)
        and not has_ended(round_, now)
    )


def find_entry_round(
    rounds: Iterable[CompetitionRound], now: datetime
) -> CompetitionRound | None:
    """Return the earliest time-open round, or None if no round is open."""
    for round_ in sort_rounds(rounds):
        if is_time_open(round_, now):
            return round_
    return None


def compute_open_rounds(
    status: ApplicantStatus,
    rounds: Iterable[CompetitionRound],
    now: datetime,
) -> list[CompetitionRound]:
    """
    List the rounds an applicant with ``status`` may submit to right now.

    Args:
        status: Applicant's current status
        rounds: Every configured round
        now: Evaluation instant

    Returns:
        Open rounds, de-duplicated by id and sorted by start time then name
    """
    time_open = [r for r in sort_rounds(rounds) if is_time_open(r, now)]
    if not time_open:
        return []

    entry, advanced = time_open[0], time_open[1:]
    visible: dict[UUID, CompetitionRound] = {}

    if status in ENTRY_ROUND_STATUSES:
        visible[entry.id] = entry

    if status in ADVANCED_ROUND_STATUSES:
        for round_ in advanced:
            visible.setdefault(round_.id, round_)

    return sort_rounds(visible.values())


def check_submission_gate(
    status: ApplicantStatus,
    stage_id: UUID,
    rounds: Iterable[CompetitionRound],
    now: datetime,
) -> CompetitionRound:
    """
    Decide whether an applicant may write a submission to ``stage_id`` now.

    Returns:
        The target round when the submission is allowed

    Raises:
        StageNotFoundError: No round with this id
        StageInactiveError: Round status is not ``active``
        StageNotStartedError: Round is active but its start time is in the future
        StageExpiredError: Round end time has passed
        NotEligibleError: Applicant status does not qualify for the round
    """
    rounds = list(rounds)
    stage = next((r for r in rounds if r.id == stage_id), None)

    if stage is None:
        raise StageNotFoundError()

    if stage.status != RoundStatus.ACTIVE:
        raise StageInactiveError()

    if not has_started(stage, now):
        raise StageNotStartedError()

    if has_ended(stage, now):
        raise StageExpiredError()

    entry = find_entry_round(rounds, now)
    if entry is not None and entry.id == stage.id:
        if status not in ENTRY_ROUND_STATUSES:
            raise NotEligibleError(status, advanced=False)
    elif status not in ADVANCED_ROUND_STATUSES:
        raise NotEligibleError(status, advanced=True)

    return stage
