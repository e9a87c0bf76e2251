# =============================================================================
# app/routers/study_items.py - Study Item Endpoints
# =============================================================================
# Notes, flashcards and quizzes inside a collection, plus text-to-speech
# audio and study tracking for a single item.
# =============================================================================

from fastapi import APIRouter, Depends, Path, status

from app.auth import get_current_user, AuthUser
from core.models.common import ok
from core.models.study_item import (
    StudyItemCreateRequest,
    StudyItemUpdateRequest,
    StudyRecordRequest,
)
from core.services.study_item_service import StudyItemService

router = APIRouter()


@router.get("/{item_id}")
def get_study_item(
    item_id: str = Path(description="Study item ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Get one study item."""
    return ok(StudyItemService.get_owned(item_id, user.id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_study_item(
    request: StudyItemCreateRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a study item in one of the user's collections.

    Raises:
        400: Missing field or unknown type
        404: Collection not found or not owned
    """
    return ok(StudyItemService.create_item(user.id, request))


@router.put("/{item_id}")
def update_study_item(
    request: StudyItemUpdateRequest,
    item_id: str = Path(description="Study item ID"),
    user: AuthUser = Depends(get_current_user),
):
    """
    Replace a study item's title, content, type and tags.

    Raises:
        400: Missing field or unknown type
        404: Not found or not owned
    """
    return ok(StudyItemService.update_item(item_id, user.id, request))


@router.delete("/{item_id}")
def delete_study_item(
    item_id: str = Path(description="Study item ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Delete a study item and its stored audio."""
    StudyItemService.delete_item(item_id, user.id)
    return ok("Study item deleted successfully")


@router.post("/{item_id}/audio")
def generate_study_item_audio(
    item_id: str = Path(description="Study item ID"),
    user: AuthUser = Depends(get_current_user),
):
    """
    Read the item aloud and attach the mp3.

    Flashcard and quiz items are read from the answer after "|||".
    Returns {audio_url}.
    """
    audio_url = StudyItemService.generate_audio(item_id, user.id)
    return ok({"audio_url": audio_url})


@router.post("/{item_id}/study")
def record_study_item(
    item_id: str = Path(description="Study item ID"),
    request: StudyRecordRequest | None = None,
    user: AuthUser = Depends(get_current_user),
):
    """Count a study pass over the item; body {duration} is optional."""
    duration = request.duration if request else None
    return ok(StudyItemService.record_study(item_id, user.id, duration))
