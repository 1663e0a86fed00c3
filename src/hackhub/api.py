from fastapi import APIRouter, Depends

from hackhub.core.auth import require_roles
from hackhub.modules.applicant_auth.router import router as applicant_auth_router
from hackhub.modules.applicants.admin_router import notifications_router
from hackhub.modules.applicants.admin_router import read_router as admin_applicants_read_router
from hackhub.modules.applicants.admin_router import router as admin_applicants_router
from hackhub.modules.applicants.admin_router import select_router as admin_applicants_select_router
from hackhub.modules.applicants.router import confirmation_router
from hackhub.modules.applicants.router import router as applicants_router
from hackhub.modules.auth import router as auth_router
from hackhub.modules.competitions.admin_router import router as admin_rounds_router
from hackhub.modules.competitions.router import router as competitions_router
from hackhub.modules.notifications.router import router as saved_notifications_router
from hackhub.modules.portal.router import router as portal_router
from hackhub.modules.settings.router import email_router as email_settings_router
from hackhub.modules.settings.router import router as settings_router
from hackhub.modules.stats.router import router as stats_router
from hackhub.modules.submissions.jury_router import router as jury_router
from hackhub.modules.users.admin_router import router as jury_accounts_router
from hackhub.modules.users.models import UserRole

admin_only = [Depends(require_roles(UserRole.ADMIN))]
admin_or_jury = [Depends(require_roles(UserRole.ADMIN, UserRole.JURY))]

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

# Applicant-facing
api_router.include_router(applicants_router, prefix="/applicant", tags=["Applicant"])
api_router.include_router(applicant_auth_router, prefix="/applicant", tags=["Applicant Login"])
api_router.include_router(portal_router, prefix="/applicant", tags=["Applicant Portal"])
api_router.include_router(confirmation_router, tags=["Applicant"])

# Public
api_router.include_router(competitions_router, prefix="/competitions", tags=["Competitions"])

# Staff
api_router.include_router(
    admin_applicants_read_router,
    prefix="/admin/applicants",
    tags=["Admin - Applicants"],
    dependencies=admin_or_jury,
)
api_router.include_router(
    admin_applicants_select_router,
    prefix="/admin/applicants",
    tags=["Admin - Applicants"],
    dependencies=admin_or_jury,
)
api_router.include_router(
    admin_applicants_router,
    prefix="/admin/applicants",
    tags=["Admin - Applicants"],
    dependencies=admin_only,
)
api_router.include_router(
    notifications_router,
    prefix="/admin/notifications",
    tags=["Admin - Notifications"],
    dependencies=admin_only,
)
api_router.include_router(
    saved_notifications_router,
    prefix="/admin/notifications",
    tags=["Admin - Notifications"],
    dependencies=admin_only,
)
api_router.include_router(
    admin_rounds_router,
    prefix="/admin/rounds",
    tags=["Admin - Rounds"],
    dependencies=admin_only,
)
api_router.include_router(
    stats_router,
    prefix="/admin",
    tags=["Admin - Statistics"],
    dependencies=admin_only,
)
api_router.include_router(
    jury_router,
    prefix="/jury",
    tags=["Jury"],
    dependencies=admin_or_jury,
)
api_router.include_router(
    jury_accounts_router,
    prefix="/admin/jury",
    tags=["Admin - Jury"],
    dependencies=admin_only,
)
api_router.include_router(
    settings_router,
    prefix="/settings",
    tags=["Admin - Settings"],
    dependencies=admin_only,
)
api_router.include_router(
    email_settings_router,
    prefix="/admin",
    tags=["Admin - Settings"],
    dependencies=admin_only,
)
