"""
Public Competition Router

Read-only round listing for the landing page.

Endpoints:
- GET /competitions/rounds - All rounds in schedule order
- GET /competitions/rounds/{id} - A single round
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error
from hackhub.modules.competitions import service
from hackhub.modules.competitions.schemas import RoundListResponse, RoundResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/rounds", response_model=RoundListResponse)
async def list_rounds(db: AsyncSession = Depends(get_db)) -> RoundListResponse:
    rounds = await service.list_rounds(db)
    return RoundListResponse(rounds=[RoundResponse.model_validate(r) for r in rounds])


@router.get("/rounds/{round_id}", response_model=RoundResponse)
async def get_round(round_id: UUID, db: AsyncSession = Depends(get_db)) -> RoundResponse:
    try:
        round_ = await service.get_round(db, round_id)
    except ServiceError as e:
        raise_http_error(e)
    return RoundResponse.model_validate(round_)
