"""
Jury Account Service

Admins create jury accounts with an initial password and can rename or
deactivate them. Deactivated members keep their reviews but can no
longer sign in. Admin accounts are not managed here.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.auth import StaffUser
from hackhub.core.errors import ConflictError, NotFoundError
from hackhub.core.security import hash_password
from hackhub.modules.users.models import User, UserRole
from hackhub.modules.users.repository import UserRepository
from hackhub.modules.users.schemas import JuryCreate, JuryUpdate

logger = logging.getLogger(__name__)


class DuplicateStaffEmailError(ConflictError):
    def __init__(self):
        super().__init__(
            message="A staff account with this email already exists",
            error_code="DUPLICATE_STAFF_EMAIL",
        )


class JuryMemberNotFoundError(NotFoundError):
    def __init__(self, user_id: UUID):
        super().__init__(message=f"Jury member {user_id} not found", error_code="JURY_NOT_FOUND")


async def list_jury(db: AsyncSession) -> list[User]:
    return await UserRepository.list_by_role(db, UserRole.JURY)


async def create_jury_member(db: AsyncSession, data: JuryCreate, staff: StaffUser) -> User:
    """
    Create an active jury account.

    Raises:
        DuplicateStaffEmailError: Any staff account already uses the email
    """
    if await UserRepository.get_by_email(db, data.email):
        raise DuplicateStaffEmailError()

    try:
        user = await UserRepository.create(
            db,
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=UserRole.JURY,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateStaffEmailError() from e

    logger.info(f"Jury member {user.id} ({user.email}) created by {staff.email}")
    return user


async def update_jury_member(
    db: AsyncSession,
    user_id: UUID,
    data: JuryUpdate,
    staff: StaffUser,
) -> User:
    """
    Rename or (de)activate a jury account.

    Raises:
        JuryMemberNotFoundError: No jury account has this id
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None or user.role != UserRole.JURY:
        raise JuryMemberNotFoundError(user_id)

    updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    for key, value in updates.items():
        setattr(user, key, value)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Jury member {user_id} updated by {staff.email}: {sorted(updates)}")
    return user
