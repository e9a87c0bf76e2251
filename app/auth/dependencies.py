# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Tokens are HS256 JWTs issued by this API (see app/auth/security.py).
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.auth.models import AuthUser, TokenPayload
from app.auth.security import ExpiredTokenError, TokenError, decode_token
from app.exceptions import AuthenticationError
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; missing headers are reported by us, not FastAPI
security = HTTPBearer(auto_error=False)

NO_TOKEN_MESSAGE = "Access denied. No token provided."
INVALID_TOKEN_MESSAGE = "Invalid token."
EXPIRED_TOKEN_MESSAGE = "Token has expired"


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Resolve the user behind the Bearer token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies signature, expiry and token type
    3. Loads the user row so deleted accounts are rejected

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired,
            or the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(NO_TOKEN_MESSAGE)

    try:
        claims = TokenPayload(**decode_token(credentials.credentials))
    except ExpiredTokenError:
        logger.warning("JWT token has expired")
        raise AuthenticationError(EXPIRED_TOKEN_MESSAGE)
    except TokenError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    except (TypeError, ValueError) as e:
        logger.warning(f"JWT claims malformed: {e}")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    try:
        row = SupabaseClient.fetch_row("users", filters={"id": claims.sub})
    except SupabaseClientError as e:
        logger.warning(f"User lookup failed for token subject {claims.sub}: {e}")
        row = None

    if not row:
        logger.warning(f"Token subject no longer exists: {claims.sub}")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    logger.debug(f"Authenticated user: {claims.sub}")
    return AuthUser.from_row(row)
