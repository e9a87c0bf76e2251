# =============================================================================
# core/models/user.py - User & Auth Schemas
# =============================================================================
# These models define the API contract for account operations:
# - RegisterRequest / LoginRequest: credential input
# - UserUpdateRequest: profile edits (name, preferences)
# - ForgotPasswordRequest / ResetPasswordRequest: password recovery
# - UserPublic: what the API returns about a user (never the password hash)
#
# Request fields are optional at the schema level so the routers can answer
# missing input with the specific 400 messages the client shows.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class UserPreferences(BaseModel):
    """
    Per-user UI preferences stored as JSONB on the users row.

    Keys use the client's camelCase names.
    """
    theme: Theme | None = None
    emailNotifications: bool | None = None
    studyReminders: bool | None = None


class RegisterRequest(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserUpdateRequest(BaseModel):
    """
    Profile update. Absent fields keep their current value.

    Example:
        {"name": "Ada", "preferences": {"theme": "dark"}}
    """
    name: str | None = Field(default=None, max_length=100)
    preferences: UserPreferences | None = None


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    token: str | None = None
    password: str | None = Field(default=None, max_length=128)


class UserPublic(BaseModel):
    """
    User profile returned to clients.

    Built from a users row; the password column is dropped.
    """
    id: str
    name: str | None = None
    email: str
    avatar_url: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None
    preferences: dict[str, Any] | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserPublic":
        return cls(
            id=str(row["id"]),
            name=row.get("name"),
            email=row["email"],
            avatar_url=row.get("avatar_url"),
            created_at=row.get("created_at"),
            last_login=row.get("last_login"),
            preferences=row.get("preferences"),
        )


class AuthPayload(BaseModel):
    """Returned by register and login."""
    user: UserPublic
    token: str
