# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Account endpoints: register, login, profile, password recovery, logout.
# Mounted at /api/auth.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from core.models.common import ok
from core.models.user import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserUpdateRequest,
)
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest):
    """
    Create an account.

    Returns the public profile and a bearer token.

    Raises:
        400: Missing field or email already registered
    """
    payload = UserService.register(request)
    return ok(payload.model_dump(mode="json"))


@router.post("/login")
def login(request: LoginRequest):
    """
    Sign in with email and password.

    Raises:
        400: Missing field
        401: Wrong email or password
    """
    payload = UserService.login(request)
    return ok(payload.model_dump(mode="json"))


@router.get("/user")
def get_user(user: AuthUser = Depends(get_current_user)):
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    return ok(user.model_dump(mode="json"))


@router.put("/user")
def update_user(
    request: UserUpdateRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update name and/or preferences.
    """
    updated = UserService.update_profile(user.model_dump(), request)
    return ok(updated.model_dump(mode="json"))


@router.post("/forgot-password")
def forgot_password(request: ForgotPasswordRequest):
    """
    Start password recovery.

    Answers the same way whether or not the email is registered.
    """
    return ok(UserService.request_password_reset(request.email))


@router.post("/reset-password")
def reset_password(request: ResetPasswordRequest):
    """
    Finish password recovery with a reset token.

    Raises:
        400: Missing field, invalid token or expired token
    """
    UserService.reset_password(request)
    return ok("Password reset successful")


@router.post("/logout")
def logout(user: AuthUser = Depends(get_current_user)):
    """
    Acknowledge a logout.

    Tokens are stateless; the client discards its copy.
    """
    logger.debug(f"User logged out: {user.id}")
    return ok("Logged out successfully")
