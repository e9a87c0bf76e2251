# =============================================================================
# core/models/ai.py - AI Feature Schemas
# =============================================================================
# These models define the API contract for the AI study tools:
# - GenerateFlashcardsRequest: study text -> flashcard set
# - SummarizeRequest: study text -> summary
# - TutorRequest: question (+ optional context) -> answer
# - TextToSpeechRequest: text -> hosted mp3 URL
# - GeneratedFlashcards: validated shape of the model's JSON output
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class AIResponseType(str, Enum):
    """Kinds of stored AI response (ai_responses.type)."""
    FLASHCARD = "flashcard"
    SUMMARY = "summary"
    TUTOR = "tutor"


class GenerateFlashcardsRequest(BaseModel):
    """
    Example:
        {"text": "Photosynthesis converts light energy...", "collection_id": "550e8400-..."}
    """
    text: str | None = None
    collection_id: str | None = Field(
        default=None,
        description="When set, the generated set is saved into this collection"
    )


class SummarizeRequest(BaseModel):
    text: str | None = None


class TutorRequest(BaseModel):
    question: str | None = None
    context: str | None = None


class TextToSpeechRequest(BaseModel):
    text: str | None = None


class GeneratedCard(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    difficulty: str | None = None


class GeneratedFlashcards(BaseModel):
    """
    JSON the model is asked to return for flashcard generation.

    Example:
        {"title": "Photosynthesis", "cards": [{"question": "...", "answer": "..."}]}
    """
    title: str = Field(default="AI Generated Flashcards")
    cards: list[GeneratedCard] = Field(default_factory=list)
