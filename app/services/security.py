"""
Security Service

Issues and verifies the JWT bearer tokens that gate the books routes.

Tokens are HS256-signed with settings.secret_key and carry:
- sub: who the token was issued to
- exp: expiry
- type: "access" or "refresh"; only access tokens open the API

Usage:
    from app.services.security import create_access_token, verify_token_type

    token = create_access_token({"sub": "librarian"})
    payload = verify_token_type(token, "access")
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

REFRESH_TOKEN_EXPIRE_DAYS = 7


def _encode(data: dict, token_type: str, expire: datetime, settings: Settings) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode in the token (should include "sub")
        expires_delta: Optional custom expiration time
        settings: Settings to sign with (defaults to get_settings())

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token({"sub": "librarian"})
        >>> token.count(".") == 2  # JWT format: header.payload.signature
        True
    """
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(data, "access", datetime.now(UTC) + expires_delta, settings)


def create_refresh_token(
    data: dict,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a JWT refresh token (longer-lived, not accepted by the API)."""
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(data, "refresh", datetime.now(UTC) + expires_delta, settings)


def decode_token(token: str, settings: Settings | None = None) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    settings = settings or get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_token_type(
    token: str,
    expected_type: str,
    settings: Settings | None = None,
) -> dict | None:
    """
    Decode a token and verify its type.

    Returns:
        Decoded payload if valid and correct type, None otherwise
    """
    payload = decode_token(token, settings)

    if payload is None:
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}")
        return None

    return payload
