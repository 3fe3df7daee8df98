"""Password hashing and JWT creation/verification for authentication."""

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import get_settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Custom claim names (registered claims use their RFC 7519 names).
CLAIM_UNIQUE_NAME = "unique_name"
CLAIM_EMAIL = "email"
CLAIM_DISPLAY_NAME = "display_name"
CLAIM_ROLE = "role"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: str,
    user_name: str | None,
    email: str | None,
    display_name: str | None,
    roles: Iterable[str],
) -> tuple[str, datetime]:
    """
    Create a signed JWT for a user; return (token, expires_at).

    Every call gets a fresh jti. The token is not stored anywhere: it stays valid
    until exp regardless of later account changes.
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": user_id,
        "jti": str(uuid.uuid4()),
        CLAIM_UNIQUE_NAME: user_name or email or user_id,
        CLAIM_ROLE: list(roles),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": expire,
    }
    if email:
        payload[CLAIM_EMAIL] = email
    if display_name and display_name.strip():
        payload[CLAIM_DISPLAY_NAME] = display_name
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expire


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT (signature, exp, iss, aud); return the claims.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        leeway=settings.JWT_CLOCK_SKEW_SECONDS,
        options={"require": ["sub", "exp"]},
    )
