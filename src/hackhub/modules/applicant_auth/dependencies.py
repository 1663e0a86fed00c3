"""
Applicant authentication dependencies.

Every applicant-facing endpoint depends on ``get_current_applicant``. A
missing header, a non-Bearer scheme, and an unknown or expired token all
produce the same 401.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hackhub.core.database import get_db
from hackhub.core.errors import raise_http_error
from hackhub.modules.applicant_auth import sessions
from hackhub.modules.applicants.models import Applicant

applicant_bearer = HTTPBearer(
    auto_error=False,
    description="Applicant session token issued by /applicant/verify-otp",
)


def get_session_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(applicant_bearer),
) -> str | None:
    """Extract the bearer token, or None when the header is absent or malformed."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


async def get_current_applicant(
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> Applicant:
    """
    Resolve the calling applicant from their session token.

    Raises:
        HTTPException 401: For any token that is not a live session
    """
    applicant = await sessions.validate_session(db, token)
    if applicant is None:
        raise_http_error(sessions.InvalidSessionError())
    return applicant
