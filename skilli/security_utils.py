"""
Security utilities: password hashing, JWT access tokens and opaque refresh tokens
"""

import hashlib
import hmac
import logging
import re
import secrets
from datetime import timedelta
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import (
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_EXPIRES_IN,
    JWT_REFRESH_SECRET,
    JWT_SECRET,
)
from .shared.dates import utcnow

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

DURATION_RE = re.compile(r"^(\d+)([dhms])$")
DURATION_UNITS = {"d": "days", "h": "hours", "m": "minutes", "s": "seconds"}

ACCESS_TOKEN_TYPE = "access"


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        # Malformed or unknown hash format stored for this user
        logger.error(f"❌ Unverifiable password hash: {e}")
        return False


# ============================================================================
# TOKENS
# ============================================================================


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration string such as "7d", "1h", "30m" or "45s".

    Raises:
        ValueError: If the string does not match <number><d|h|m|s>
    """
    match = DURATION_RE.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid duration format: {value!r}")
    amount, unit = int(match.group(1)), match.group(2)
    return timedelta(**{DURATION_UNITS[unit]: amount})


def create_access_token(user_id: str, email: str, expires_in: Optional[str] = None) -> str:
    """Sign a short-lived HS256 access token"""
    now = utcnow()
    payload = {
        "sub": user_id,
        "email": email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + parse_duration(expires_in or JWT_EXPIRES_IN),
    }
    return jose_jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """Return the claims of a valid access token, None otherwise"""
    try:
        payload = jose_jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Access token rejected: {e}")
        return None
    if payload.get("type") != ACCESS_TOKEN_TYPE or not payload.get("sub"):
        return None
    return payload


def generate_refresh_token() -> str:
    """Opaque refresh token handed to the client"""
    return secrets.token_urlsafe(48)


def hash_token(token: str) -> str:
    """Keyed hash under which refresh tokens are persisted"""
    return hmac.new(JWT_REFRESH_SECRET.encode(), token.encode(), hashlib.sha256).hexdigest()
