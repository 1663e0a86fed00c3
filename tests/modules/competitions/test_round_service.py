"""
Unit tests for round CRUD and the stage document checklist.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from pydantic import ValidationError

from hackhub.modules.competitions import service
from hackhub.modules.competitions.models import RoundStatus
from hackhub.modules.competitions.schemas import RoundCreate, RoundUpdate


@pytest.fixture
def cache():
    return MagicMock()


class TestCreateRound:
    """Tests for create_round."""

    @pytest.mark.asyncio
    async def test_requirements_are_stored_as_plain_dicts(self, mock_db, cache, round_factory):
        created = round_factory("Ideation")
        data = RoundCreate(
            name="Ideation",
            requirements=[{"description": "Pitch deck", "template": "/t/deck.pptx"}],
        )

        with patch.object(service.repository, "create", AsyncMock(return_value=created)) as mock_create:
            result = await service.create_round(mock_db, data, cache)

        assert result is created
        fields = mock_create.call_args.args[1]
        assert fields["requirements"] == [
            {"description": "Pitch deck", "template": "/t/deck.pptx"}
        ]
        assert fields["status"] == RoundStatus.UPCOMING
        mock_db.commit.assert_awaited_once()
        cache.invalidate_stats.assert_called_once()

    def test_window_must_be_ordered(self, now):
        with pytest.raises(ValidationError):
            RoundCreate(name="Bad", start_time=now, end_time=now)

    def test_naive_end_time_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            RoundCreate(
                name="Mixed",
                start_time="2026-03-15T10:00:00Z",
                end_time="2026-03-15T12:00:00",
            )

        assert exc_info.value.errors()[0]["loc"] == ("end_time",)

    def test_offsets_are_compared_as_instants(self):
        data = RoundCreate(
            name="Offsets",
            start_time="2026-03-15T10:00:00+02:00",
            end_time="2026-03-15T09:30:00Z",
        )

        assert data.end_time > data.start_time


class TestUpdateRound:
    """Tests for update_round."""

    def test_naive_time_is_rejected(self):
        with pytest.raises(ValidationError):
            RoundUpdate(end_time="2026-03-15T12:00:00")

    @pytest.mark.asyncio
    async def test_partial_update(self, mock_db, cache, round_factory):
        round_ = round_factory("Ideation", status=RoundStatus.UPCOMING)

        with patch.object(service.repository, "get_by_id", AsyncMock(return_value=round_)):
            await service.update_round(
                mock_db, round_.id, RoundUpdate(status=RoundStatus.ACTIVE), cache
            )

        assert round_.status == RoundStatus.ACTIVE
        assert round_.name == "Ideation"
        cache.invalidate_stats.assert_called_once()

    @pytest.mark.asyncio
    async def test_merged_window_is_validated(self, mock_db, cache, round_factory, now):
        round_ = round_factory("Ideation", start_time=now, end_time=now + timedelta(days=2))

        with patch.object(service.repository, "get_by_id", AsyncMock(return_value=round_)):
            with pytest.raises(service.InvalidRoundWindowError):
                await service.update_round(
                    mock_db, round_.id, RoundUpdate(end_time=now - timedelta(hours=1)), cache
                )

        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_round(self, mock_db, cache):
        with patch.object(service.repository, "get_by_id", AsyncMock(return_value=None)):
            with pytest.raises(service.RoundNotFoundError):
                await service.update_round(mock_db, uuid4(), RoundUpdate(name="x"), cache)


class TestDeleteRound:
    """Tests for delete_round."""

    @pytest.mark.asyncio
    async def test_delete(self, mock_db, cache, round_factory):
        round_ = round_factory("Ideation")

        with (
            patch.object(service.repository, "get_by_id", AsyncMock(return_value=round_)),
            patch.object(service.repository, "delete_round", AsyncMock()) as mock_delete,
        ):
            await service.delete_round(mock_db, round_.id, cache)

        mock_delete.assert_awaited_once_with(mock_db, round_)
        mock_db.commit.assert_awaited_once()
        cache.invalidate_stats.assert_called_once()


class TestStageDocuments:
    """Tests for stage_documents."""

    def test_checklist_from_requirements(self, round_factory):
        round_ = round_factory(
            "Prototype",
            requirements=[
                {"description": "Source archive", "template": "/templates/source.zip"},
                {"description": "Demo video", "template": None},
            ],
        )

        documents = service.stage_documents(round_)

        assert [d.id for d in documents] == [f"{round_.id}-doc-0", f"{round_.id}-doc-1"]
        assert documents[0].file_type == "zip"
        assert documents[0].file_url == "/templates/source.zip"
        assert documents[1].file_type == "unknown"
        assert documents[1].file_url is None
        assert all(d.is_required for d in documents)

    def test_round_without_requirements(self, round_factory):
        assert service.stage_documents(round_factory("Empty")) == []
