"""
Unit tests for the stage eligibility engine.

These tests cover:
- Time-open evaluation and round ordering
- Entry round universality and advanced round gating
- The write-time submission gate and its failure modes
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from hackhub.modules.applicants.models import ApplicantStatus
from hackhub.modules.competitions.eligibility import (
    NotEligibleError,
    StageExpiredError,
    StageInactiveError,
    StageNotFoundError,
    StageNotStartedError,
    check_submission_gate,
    compute_open_rounds,
    find_entry_round,
    is_time_open,
    sort_rounds,
)
from hackhub.modules.competitions.models import RoundStatus


class TestIsTimeOpen:
    """Tests for the time-open predicate."""

    def test_active_round_without_window_is_open(self, round_factory, now):
        assert is_time_open(round_factory("A"), now)

    def test_upcoming_and_completed_rounds_are_closed(self, round_factory, now):
        assert not is_time_open(round_factory("A", status=RoundStatus.UPCOMING), now)
        assert not is_time_open(round_factory("B", status=RoundStatus.COMPLETED), now)

    def test_future_start_is_closed(self, round_factory, now):
        round_ = round_factory("A", start_time=now + timedelta(seconds=1))
        assert not is_time_open(round_, now)

    def test_start_at_now_is_open(self, round_factory, now):
        assert is_time_open(round_factory("A", start_time=now), now)

    def test_end_at_now_is_closed(self, round_factory, now):
        """The end instant itself is already outside the window."""
        assert not is_time_open(round_factory("A", end_time=now), now)
        assert is_time_open(round_factory("B", end_time=now + timedelta(seconds=1)), now)


class TestSortRounds:
    """Tests for round ordering."""

    def test_orders_by_start_time_then_name(self, round_factory, now):
        late = round_factory("Alpha", start_time=now)
        early = round_factory("Zulu", start_time=now - timedelta(days=1))
        tie = round_factory("Beta", start_time=now)

        assert [r.name for r in sort_rounds([late, early, tie])] == ["Zulu", "Alpha", "Beta"]

    def test_unscheduled_rounds_sort_last(self, round_factory, now):
        unscheduled = round_factory("Aardvark")
        scheduled = round_factory("Zebra", start_time=now - timedelta(hours=1))

        assert sort_rounds([unscheduled, scheduled]) == [scheduled, unscheduled]


class TestComputeOpenRounds:
    """Tests for the dashboard's open round set."""

    @pytest.fixture
    def two_open_rounds(self, round_factory, now):
        entry = round_factory("Round A", start_time=now - timedelta(days=2))
        advanced = round_factory("Round B", start_time=now - timedelta(days=1))
        return entry, advanced

    def test_registered_sees_only_entry_round(self, two_open_rounds, now):
        entry, advanced = two_open_rounds

        result = compute_open_rounds(ApplicantStatus.REGISTERED, [advanced, entry], now)

        assert result == [entry]

    @pytest.mark.parametrize(
        "status",
        [ApplicantStatus.SELECTED, ApplicantStatus.CONFIRMED, ApplicantStatus.SUBMITTED],
    )
    def test_selected_statuses_see_all_open_rounds(self, two_open_rounds, now, status):
        entry, advanced = two_open_rounds

        result = compute_open_rounds(status, [advanced, entry], now)

        assert result == [entry, advanced]

    @pytest.mark.parametrize(
        "status",
        [ApplicantStatus.REJECTED, ApplicantStatus.NOT_SELECTED, ApplicantStatus.ROUND1],
    )
    def test_other_statuses_see_nothing(self, two_open_rounds, now, status):
        assert compute_open_rounds(status, list(two_open_rounds), now) == []

    def test_closed_rounds_are_never_listed(self, round_factory, now):
        expired = round_factory("Expired", end_time=now - timedelta(minutes=1))
        upcoming = round_factory("Upcoming", status=RoundStatus.UPCOMING)

        assert compute_open_rounds(ApplicantStatus.SELECTED, [expired, upcoming], now) == []

    def test_expired_first_round_promotes_next_round_to_entry(self, round_factory, now):
        """Only time-open rounds compete for the entry slot."""
        expired = round_factory(
            "Round A",
            start_time=now - timedelta(days=3),
            end_time=now - timedelta(days=1),
        )
        current = round_factory("Round B", start_time=now - timedelta(days=1))

        assert find_entry_round([expired, current], now) is current
        assert compute_open_rounds(ApplicantStatus.REGISTERED, [expired, current], now) == [
            current
        ]

    def test_no_rounds(self, now):
        assert compute_open_rounds(ApplicantStatus.REGISTERED, [], now) == []


class TestCheckSubmissionGate:
    """Tests for the write-time submission gate."""

    def test_unknown_stage(self, round_factory, now):
        with pytest.raises(StageNotFoundError) as exc_info:
            check_submission_gate(ApplicantStatus.REGISTERED, uuid4(), [round_factory("A")], now)

        assert exc_info.value.status_code == 404

    def test_inactive_stage(self, round_factory, now):
        round_ = round_factory("A", status=RoundStatus.UPCOMING)

        with pytest.raises(StageInactiveError) as exc_info:
            check_submission_gate(ApplicantStatus.REGISTERED, round_.id, [round_], now)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "This stage is not currently active"

    def test_not_started_stage(self, round_factory, now):
        round_ = round_factory("A", start_time=now + timedelta(hours=1))

        with pytest.raises(StageNotStartedError):
            check_submission_gate(ApplicantStatus.REGISTERED, round_.id, [round_], now)

    def test_expired_stage(self, round_factory, now):
        round_ = round_factory("A", end_time=now - timedelta(seconds=1))

        with pytest.raises(StageExpiredError) as exc_info:
            check_submission_gate(ApplicantStatus.SELECTED, round_.id, [round_], now)

        assert exc_info.value.message == "This stage has expired"

    def test_registered_may_submit_to_entry_round(self, round_factory, now):
        entry = round_factory("A", start_time=now - timedelta(days=1))

        assert check_submission_gate(ApplicantStatus.REGISTERED, entry.id, [entry], now) is entry

    def test_registered_rejected_from_advanced_round(self, round_factory, now):
        entry = round_factory("A", start_time=now - timedelta(days=2))
        advanced = round_factory("B", start_time=now - timedelta(days=1))

        with pytest.raises(NotEligibleError) as exc_info:
            check_submission_gate(ApplicantStatus.REGISTERED, advanced.id, [entry, advanced], now)

        assert exc_info.value.status_code == 403
        assert exc_info.value.advanced is True
        assert "must be selected" in exc_info.value.message

    def test_selected_may_submit_to_advanced_round(self, round_factory, now):
        entry = round_factory("A", start_time=now - timedelta(days=2))
        advanced = round_factory("B", start_time=now - timedelta(days=1))

        result = check_submission_gate(ApplicantStatus.SELECTED, advanced.id, [entry, advanced], now)

        assert result is advanced

    def test_advanced_round_rejected_after_end_time(self, round_factory, now):
        entry = round_factory("A", start_time=now - timedelta(days=2))
        advanced = round_factory(
            "B", start_time=now - timedelta(days=1), end_time=now + timedelta(hours=1)
        )
        later = now + timedelta(hours=1)

        with pytest.raises(StageExpiredError):
            check_submission_gate(ApplicantStatus.SELECTED, advanced.id, [entry, advanced], later)

    def test_rejected_applicant_cannot_submit_to_entry_round(self, round_factory, now):
        entry = round_factory("A")

        with pytest.raises(NotEligibleError) as exc_info:
            check_submission_gate(ApplicantStatus.REJECTED, entry.id, [entry], now)

        assert exc_info.value.advanced is False
        assert "must be selected" not in exc_info.value.message
        assert "Current status: rejected." in exc_info.value.message
