# =============================================================================
# app/routers/activity.py - Activity Feed Endpoint
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user, AuthUser
from core.models.common import ok
from core.services.activity_service import ActivityService, DEFAULT_LIMIT

router = APIRouter()


@router.get("")
def list_activity(
    user: AuthUser = Depends(get_current_user),
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum entries")] = DEFAULT_LIMIT,
):
    """
    The user's recent activity, newest first.

    Entries record create, edit, delete, study and ai_generate actions.
    """
    return ok(ActivityService.list_recent(user.id, limit=limit))
