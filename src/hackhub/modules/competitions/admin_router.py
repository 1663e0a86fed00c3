"""
Competition Round Admin Router

Round management for administrators. The whole router requires the
``admin`` role (declared where it is mounted).

Endpoints:
- GET /admin/rounds - List rounds
- POST /admin/rounds - Create a round
- PUT /admin/rounds/{id} - Update a round
- DELETE /admin/rounds/{id} - Delete a round and its submissions
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.cache import StatsCache, get_stats_cache
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.competitions import service
from hackhub.modules.competitions.schemas import (
    RoundCreate,
    RoundListResponse,
    RoundResponse,
    RoundUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=RoundListResponse)
async def list_rounds(db: AsyncSession = Depends(get_db)) -> RoundListResponse:
    rounds = await service.list_rounds(db)
    return RoundListResponse(rounds=[RoundResponse.model_validate(r) for r in rounds])


@router.post("", response_model=RoundResponse, status_code=status.HTTP_201_CREATED)
async def create_round(
    body: RoundCreate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> RoundResponse:
    try:
        round_ = await service.create_round(db, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("create the round")

    logger.info(f"Round {round_.id} created by {staff.email}")
    return RoundResponse.model_validate(round_)


@router.put("/{round_id}", response_model=RoundResponse)
async def update_round(
    round_id: UUID,
    body: RoundUpdate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> RoundResponse:
    try:
        round_ = await service.update_round(db, round_id, body, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update the round")

    logger.info(f"Round {round_id} updated by {staff.email}")
    return RoundResponse.model_validate(round_)


@router.delete("/{round_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_round(
    round_id: UUID,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
) -> None:
    try:
        await service.delete_round(db, round_id, cache)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("delete the round")

    logger.info(f"Round {round_id} deleted by {staff.email}")
