"""
Security Utilities

Password hashing (bcrypt), JWT issuing/decoding for staff accounts, and
opaque token helpers for applicant sessions and one-time passwords.

Opaque tokens are generated with the ``secrets`` module and only their
SHA-256 digest is persisted, so a database leak does not expose usable
credentials.
"""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from hackhub.core.config import settings

logger = logging.getLogger(__name__)

OPAQUE_TOKEN_BYTES = 32  # 256 bits of entropy


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain password against a stored bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _create_token(
    subject: str,
    token_type: str,
    expires_delta: timedelta,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    if additional_claims:
        payload.update(additional_claims)
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    subject: str,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """
    Create a short-lived access token.

    Args:
        subject: User ID placed in the ``sub`` claim
        additional_claims: Extra claims (email, role, name)

    Returns:
        Encoded JWT
    """
    return _create_token(
        subject,
        "access",
        timedelta(minutes=settings.access_token_expire_minutes),
        additional_claims,
    )


def create_refresh_token(subject: str) -> str:
    """Create a long-lived refresh token."""
    return _create_token(
        subject,
        "refresh",
        timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Returns:
        The claims dict, or None if the signature, algorithm or expiry
        check fails.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        logger.debug("JWT expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"JWT rejected: {e}")
        return None


def generate_opaque_token() -> str:
    """Generate a URL-safe bearer token from a CSPRNG."""
    return secrets.token_urlsafe(OPAQUE_TOKEN_BYTES)


def generate_numeric_code(length: int) -> str:
    """Generate a numeric code, each digit drawn uniformly from 0-9."""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def hash_token(token: str) -> str:
    """
    Hash a token for storage using SHA-256.

    Args:
        token: The plain token or code

    Returns:
        Hex-encoded SHA-256 digest
    """
    return hashlib.sha256(token.encode()).hexdigest()
