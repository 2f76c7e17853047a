"""
Credentials and Access Tokens

Reviewers sign in with email and password and then send a short-lived
bearer token with every review or catalog write.

- Passwords: bcrypt via passlib; only the hash is stored on User
- Tokens: HS256 JWTs via python-jose, carrying the user id in "sub" and
  a "type" claim that must be "access"

Usage:
    from bookreviews.services.security import create_access_token, verify_token_type

    token = create_access_token({"sub": str(user.id)})
    payload = verify_token_type(token)  # None if forged, expired or wrong type
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from bookreviews.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """Bcrypt hash for storage in users.hashed_password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login attempt against the stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign a bearer token for a reviewer.

    Args:
        data: Claims to sign; the auth dependencies expect {"sub": "<user id>"}
        expires_delta: Lifetime override (defaults to
            ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        The encoded token
    """
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        **data,
        "exp": datetime.now(UTC) + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    """Claims of a token signed with SECRET_KEY, or None if it is invalid or expired."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return None


def verify_token_type(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict | None:
    """
    Decode a bearer token and require its "type" claim.

    Returns:
        The claims, or None when the token is invalid or of another type
    """
    payload = decode_token(token)
    if payload is None:
        return None

    if payload.get("type") != expected_type:
        logger.warning(
            f"Rejected bearer token of type {payload.get('type')!r}, expected {expected_type!r}"
        )
        return None

    return payload
