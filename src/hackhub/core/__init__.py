"""
Core module - Configuration, database, security, errors, and utilities.
"""

from hackhub.core.config import get_settings, settings
from hackhub.core.database import Base, close_db, get_db, init_db
from hackhub.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
    UpstreamFailureError,
)
from hackhub.core.redis import close_redis, get_redis, init_redis
from hackhub.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Errors
    "ServiceError",
    "InvalidRequestError",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "UpstreamFailureError",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
