# =============================================================================
# app/routers/flashcards.py - Flashcard Set Endpoints
# =============================================================================
# Flashcard sets with their cards, and study session recording.
# =============================================================================

from fastapi import APIRouter, Depends, Path, status

from app.auth import get_current_user, AuthUser
from core.models.common import ok
from core.models.flashcard import (
    FlashcardSetCreateRequest,
    FlashcardSetUpdateRequest,
    StudySessionResults,
)
from core.services.flashcard_service import FlashcardService

router = APIRouter()


@router.get("")
def list_flashcard_sets(user: AuthUser = Depends(get_current_user)):
    """The user's flashcard sets with their cards, newest first."""
    return ok(FlashcardService.list_sets(user.id))


@router.get("/{set_id}")
def get_flashcard_set(
    set_id: str = Path(description="Flashcard set ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Get one flashcard set with its cards."""
    return ok(FlashcardService.get_set(set_id, user.id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_flashcard_set(
    request: FlashcardSetCreateRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a set and its cards.

    Raises:
        400: Title or cards missing, or a card without question/answer
        404: collection_id given but not owned
    """
    return ok(FlashcardService.create_set(user.id, request))


@router.put("/{set_id}")
def update_flashcard_set(
    request: FlashcardSetUpdateRequest,
    set_id: str = Path(description="Flashcard set ID"),
    user: AuthUser = Depends(get_current_user),
):
    """
    Update a set.

    A cards list replaces every card in the set; omitting cards keeps them.
    """
    return ok(FlashcardService.update_set(set_id, user.id, request))


@router.delete("/{set_id}")
def delete_flashcard_set(
    set_id: str = Path(description="Flashcard set ID"),
    user: AuthUser = Depends(get_current_user),
):
    """Delete a set and its cards."""
    FlashcardService.delete_set(set_id, user.id)
    return ok("Flashcard set deleted successfully")


@router.post("/{set_id}/study")
def record_study_session(
    set_id: str = Path(description="Flashcard set ID"),
    results: StudySessionResults | None = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Record a finished study session.

    Returns {set, results}: the updated set and the echoed results.
    """
    return ok(FlashcardService.record_study_session(set_id, user.id, results or StudySessionResults()))
