# =============================================================================
# app/routers/ai.py - AI Study Tool Endpoints
# =============================================================================
# Flashcard generation, summaries, tutoring and text-to-speech.
# Vendor failures surface as 500 "Server error"; the cause is logged.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user, AuthUser
from core.models.ai import (
    AIResponseType,
    GenerateFlashcardsRequest,
    SummarizeRequest,
    TextToSpeechRequest,
    TutorRequest,
)
from core.models.common import ok
from core.services.ai_service import AIService

router = APIRouter()


@router.post("/flashcards")
def generate_flashcards(
    request: GenerateFlashcardsRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Generate flashcards from study text.

    With collection_id the set is saved there; without it the set comes
    back unsaved with id null.

    Raises:
        400: Text missing
        404: collection_id given but not owned
    """
    flashcard_set = AIService.generate_flashcards(user.id, request.text, request.collection_id)
    return ok({"flashcards": flashcard_set})


@router.post("/summarize")
def summarize(
    request: SummarizeRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Summarize study text. Returns {summary}."""
    return ok({"summary": AIService.summarize(user.id, request.text)})


@router.post("/tutor")
def tutor(
    request: TutorRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Answer a study question, optionally against provided context. Returns {answer}."""
    return ok({"answer": AIService.tutor(user.id, request.question, request.context)})


@router.post("/text-to-speech")
def text_to_speech(
    request: TextToSpeechRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Convert text to an mp3 and return {audio_url}."""
    return ok({"audio_url": AIService.text_to_speech(user.id, request.text)})


@router.get("/history")
def ai_history(
    user: AuthUser = Depends(get_current_user),
    type: Annotated[AIResponseType | None, Query(description="Filter by response type")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum entries")] = 20,
):
    """The user's stored AI responses, newest first."""
    return ok(AIService.list_history(user.id, response_type=type, limit=limit))
