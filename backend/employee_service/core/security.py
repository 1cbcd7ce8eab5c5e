import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

import bcrypt
from jose import jwt, JWTError

from employee_service.core.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

ROLE_EMPLOYEE = "employee"
ROLE_ADMIN = "admin"


def _encode(claims: dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    now = datetime.utcnow()
    to_encode = {
        **claims,
        "iat": now,
        "exp": now + expires_delta,
        # Unique per token so a rotated token never equals its predecessor
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def create_access_token(
    subject: str | Any,
    role: str = ROLE_EMPLOYEE,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a short-lived JWT access token.

    Args:
        subject: The subject of the token (employee or admin ID)
        role: Which kind of principal the subject refers to
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {"sub": str(subject), "role": role, "type": ACCESS_TOKEN_TYPE}
    return _encode(claims, settings.ACCESS_TOKEN_SECRET, expires_delta)


def create_refresh_token(subject: str | Any, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a long-lived JWT refresh token, signed with its own secret.

    Args:
        subject: The employee ID
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    claims = {"sub": str(subject), "type": REFRESH_TOKEN_TYPE}
    return _encode(claims, settings.REFRESH_TOKEN_SECRET, expires_delta)


def _decode(token: str, secret: str, expected_type: str) -> dict[str, Any]:
    payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    if payload.get("type") != expected_type:
        raise JWTError("Unexpected token type")
    if not payload.get("sub"):
        raise JWTError("Token has no subject")
    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify an access token's signature, expiry and type.

    Raises:
        JWTError: If the token is malformed, expired or not an access token
    """
    return _decode(token, settings.ACCESS_TOKEN_SECRET, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict[str, Any]:
    """
    Verify a refresh token's signature, expiry and type.

    Raises:
        JWTError: If the token is malformed, expired or not a refresh token
    """
    return _decode(token, settings.REFRESH_TOKEN_SECRET, REFRESH_TOKEN_TYPE)


def _prepare_password(password: str) -> bytes:
    """
    Prepare password for bcrypt by encoding and truncating to 72 bytes.

    Args:
        password: Plain text password

    Returns:
        Password bytes truncated to 72 bytes (bcrypt limit)
    """
    return password.encode('utf-8')[:72]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password
        hashed_password: The hashed password from database

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(
            _prepare_password(plain_password),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    hashed = bcrypt.hashpw(_prepare_password(password), salt)
    return hashed.decode('utf-8')
