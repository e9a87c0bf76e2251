# =============================================================================
# core/services/user_service.py - Account Business Logic
# =============================================================================
# Registration, login, profile updates and password recovery against the
# users and password_resets tables.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import parse_timestamp, utc_now, utc_now_iso
from core.models.user import (
    AuthPayload,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserPublic,
    UserUpdateRequest,
)
from app.auth.security import (
    RESET_TOKEN_TYPE,
    TokenError,
    create_access_token,
    create_reset_token,
    decode_token,
    hash_password,
    password_too_long,
    verify_password,
)
from app.config import settings
from app.exceptions import BadRequestError, DatabaseError, InvalidCredentialsError

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
RESETS_TABLE = "password_resets"

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent."


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _check_password_length(password: str) -> None:
    if password_too_long(password):
        raise BadRequestError("Password must be at most 72 bytes long")


class UserService:
    """
    Service for account operations.
    """

    @staticmethod
    def get_by_id(user_id: UUID | str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_row(USERS_TABLE, filters={"id": str(user_id)})

    @staticmethod
    def get_by_email(email: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_row(USERS_TABLE, filters={"email": _normalize_email(email)})

    @staticmethod
    def register(request: RegisterRequest) -> AuthPayload:
        """
        Create an account and sign it in.

        Raises:
            BadRequestError: If a field is missing or the email is taken
        """
        if not (request.name and request.email and request.password):
            raise BadRequestError("Please provide name, email, and password")
        _check_password_length(request.password)

        email = _normalize_email(request.email)

        if UserService.get_by_email(email):
            raise BadRequestError("User already exists")

        try:
            user = SupabaseClient.insert_row(USERS_TABLE, {
                "name": request.name.strip(),
                "email": email,
                "password": hash_password(request.password),
            })
        except SupabaseClientError as e:
            raise DatabaseError("Error creating user", str(e))

        logger.info(f"Registered user: {user['id']}")

        return AuthPayload(
            user=UserPublic.from_row(user),
            token=create_access_token(user["id"]),
        )

    @staticmethod
    def login(request: LoginRequest) -> AuthPayload:
        """
        Check credentials, stamp last_login and issue a token.

        Raises:
            BadRequestError: If email or password is missing
            InvalidCredentialsError: If either is wrong
        """
        if not (request.email and request.password):
            raise BadRequestError("Please provide email and password")

        user = UserService.get_by_email(request.email)
        if not user or not verify_password(request.password, user.get("password")):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        try:
            rows = SupabaseClient.update_rows(
                USERS_TABLE,
                {"last_login": utc_now_iso()},
                filters={"id": user["id"]},
            )
            if rows:
                user = rows[0]
        except SupabaseClientError as e:
            # A stale last_login shouldn't block sign-in
            logger.warning(f"Could not update last_login for {user['id']}: {e}")

        return AuthPayload(
            user=UserPublic.from_row(user),
            token=create_access_token(user["id"]),
        )

    @staticmethod
    def update_profile(
        user: dict[str, Any],
        request: UserUpdateRequest,
    ) -> UserPublic:
        """
        Update name and/or preferences; absent fields keep current values.
        """
        values: dict[str, Any] = {
            "name": (request.name or "").strip() or user.get("name"),
            "preferences": (
                {
                    **(user.get("preferences") or {}),
                    **request.preferences.model_dump(mode="json", exclude_none=True),
                }
                if request.preferences is not None
                else user.get("preferences")
            ),
        }

        try:
            rows = SupabaseClient.update_rows(USERS_TABLE, values, filters={"id": user["id"]})
        except SupabaseClientError as e:
            raise DatabaseError("Error updating user", str(e))

        if not rows:
            raise DatabaseError("Error updating user", "update matched no rows")

        return UserPublic.from_row(rows[0])

    @staticmethod
    def request_password_reset(email: str | None) -> str:
        """
        Store a reset token for a known email.

        Always returns the same message, whether or not the account exists.

        Raises:
            BadRequestError: If email is missing
        """
        if not email:
            raise BadRequestError("Please provide email")

        user = UserService.get_by_email(email)
        if not user:
            return RESET_REQUESTED_MESSAGE

        token = create_reset_token(user["id"])
        expires_at = utc_now() + settings.reset_token_ttl

        try:
            SupabaseClient.insert_row(RESETS_TABLE, {
                "user_id": user["id"],
                "token": token,
                "expires_at": expires_at.isoformat(),
            })
        except SupabaseClientError as e:
            raise DatabaseError("Error creating password reset", str(e))

        # Email delivery is handled outside this service
        logger.info(f"Password reset requested for user: {user['id']}")
        if settings.is_development and settings.SITE_URL:
            logger.info(f"Reset link: {settings.SITE_URL.rstrip('/')}/reset-password?token={token}")

        return RESET_REQUESTED_MESSAGE

    @staticmethod
    def reset_password(request: ResetPasswordRequest) -> None:
        """
        Set a new password using a stored reset token.

        The token must verify as a reset JWT and still be on record; it is
        deleted once used.

        Raises:
            BadRequestError: If input is missing or the token is unusable
        """
        if not (request.token and request.password):
            raise BadRequestError("Please provide token and password")
        _check_password_length(request.password)

        try:
            claims = decode_token(request.token, expected_type=RESET_TOKEN_TYPE)
        except TokenError:
            raise BadRequestError("Invalid or expired token")

        stored = SupabaseClient.fetch_row(RESETS_TABLE, filters={"token": request.token})
        if not stored or str(stored.get("user_id")) != str(claims["sub"]):
            raise BadRequestError("Invalid or expired token")

        expires_at = parse_timestamp(stored.get("expires_at"))
        if expires_at is None or expires_at < utc_now():
            raise BadRequestError("Token expired")

        try:
            SupabaseClient.update_rows(
                USERS_TABLE,
                {"password": hash_password(request.password)},
                filters={"id": claims["sub"]},
            )
            SupabaseClient.delete_rows(RESETS_TABLE, filters={"token": request.token})
        except SupabaseClientError as e:
            raise DatabaseError("Error resetting password", str(e))

        logger.info(f"Password reset for user: {claims['sub']}")
