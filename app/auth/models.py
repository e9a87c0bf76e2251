# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict

from core.models.user import UserPublic


class AuthUser(UserPublic):
    """
    Authenticated user resolved from a bearer token.

    Loaded from the users table on every request, so a deleted account
    stops authenticating immediately. Never carries the password hash.
    """
    model_config = ConfigDict(frozen=True)


class TokenPayload(BaseModel):
    """
    Decoded access token claims.
    """
    sub: str  # User ID
    type: str  # "access" or "password_reset"
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    jti: Optional[str] = None
