"""
Jury Account Admin Router

Admin only (declared where the router is mounted).

Endpoints:
- GET /admin/jury - List jury accounts
- POST /admin/jury - Create a jury account
- PATCH /admin/jury/{id} - Rename, activate or deactivate a jury account
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser, get_current_staff_user
from hackhub.core.database import get_db
from hackhub.core.errors import ServiceError, raise_http_error, raise_internal_error
from hackhub.modules.auth.schemas import StaffUserResponse
from hackhub.modules.users import service
from hackhub.modules.users.schemas import JuryCreate, JuryListResponse, JuryUpdate

router = APIRouter()


@router.get("", response_model=JuryListResponse)
async def list_jury(db: AsyncSession = Depends(get_db)) -> JuryListResponse:
    members = await service.list_jury(db)
    return JuryListResponse(jury_members=[StaffUserResponse.model_validate(m) for m in members])


@router.post("", response_model=StaffUserResponse, status_code=status.HTTP_201_CREATED)
async def create_jury_member(
    body: JuryCreate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> StaffUserResponse:
    try:
        user = await service.create_jury_member(db, body, staff)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("create the jury member")
    return StaffUserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=StaffUserResponse)
async def update_jury_member(
    user_id: UUID,
    body: JuryUpdate,
    staff: StaffUser = Depends(get_current_staff_user),
    db: AsyncSession = Depends(get_db),
) -> StaffUserResponse:
    try:
        user = await service.update_jury_member(db, user_id, body, staff)
    except ServiceError as e:
        raise_http_error(e)
    except Exception:
        raise_internal_error("update the jury member")
    return StaffUserResponse.model_validate(user)
