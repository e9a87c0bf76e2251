# =============================================================================
# app/auth/security.py - Password Hashing & Token Issuing
# =============================================================================
# - bcrypt for password hashes stored in users.password
# - python-jose HS256 JWTs for access and password-reset tokens
#
# Tokens carry a "type" claim so a reset token can never be used as an
# access token (and vice versa).
# =============================================================================

import uuid
from datetime import timedelta
from typing import Any

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from lib.utils import utc_now

ACCESS_TOKEN_TYPE = "access"
RESET_TOKEN_TYPE = "password_reset"

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Raised when a token cannot be used."""


class ExpiredTokenError(TokenError):
    """The token's exp claim is in the past."""


class InvalidTokenError(TokenError):
    """Bad signature, malformed token, wrong type or missing subject."""


# =============================================================================
# Passwords
# =============================================================================

def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_BYTES


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# =============================================================================
# Tokens
# =============================================================================

def _create_token(user_id: str, token_type: str, ttl: timedelta) -> str:
    now = utc_now()
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: str) -> str:
    """Issue a bearer token valid for JWT_EXPIRATION_DAYS."""
    return _create_token(user_id, ACCESS_TOKEN_TYPE, settings.access_token_ttl)


def create_reset_token(user_id: str) -> str:
    """Issue a one-off password reset token valid for PASSWORD_RESET_EXPIRATION_MINUTES."""
    return _create_token(user_id, RESET_TOKEN_TYPE, settings.reset_token_ttl)


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        ExpiredTokenError: If the token has expired
        InvalidTokenError: If the signature, type or subject is wrong
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise ExpiredTokenError("Token has expired") from exc
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    if payload.get("type") != expected_type:
        raise InvalidTokenError(f"Expected a {expected_type} token")

    if not str(payload.get("sub", "")).strip():
        raise InvalidTokenError("Token missing subject")

    return payload
