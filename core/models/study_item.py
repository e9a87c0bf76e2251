# =============================================================================
# core/models/study_item.py - Study Item Schemas
# =============================================================================
# A study item is a note, flashcard or quiz entry inside a collection.
#
# Flashcard and quiz items keep question and answer in one content string,
# separated by CONTENT_DELIMITER:
#   "What is ATP? ||| The cell's energy currency"
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field

CONTENT_DELIMITER = "|||"


class StudyItemType(str, Enum):
    """
    Kinds of study item.

    - note: free text
    - flashcard: question ||| answer
    - quiz: question ||| answer
    """
    NOTE = "note"
    FLASHCARD = "flashcard"
    QUIZ = "quiz"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class StudyItemCreateRequest(BaseModel):
    """
    Body for creating a study item.

    Example:
        {
            "collection_id": "550e8400-...",
            "type": "flashcard",
            "title": "ATP",
            "content": "What is ATP? ||| The cell's energy currency",
            "tags": ["biology"]
        }
    """
    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    type: str | None = Field(default=None, description="note, flashcard or quiz")
    tags: list[str] | None = None
    collection_id: str | None = None


class StudyItemUpdateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    type: str | None = None
    tags: list[str] | None = None


class StudyRecordRequest(BaseModel):
    """Body for recording a study pass over a single item."""
    duration: int | None = Field(
        default=None,
        ge=0,
        description="Seconds spent studying"
    )


def speech_text_for_item(item_type: str, content: str, max_chars: int) -> str:
    """
    Pick the text to read aloud for a study item.

    Flashcard and quiz items are read from their answer part when the
    content holds a delimiter; everything else reads the whole content.
    The result is truncated to max_chars.
    """
    text = content or ""

    if item_type in (StudyItemType.FLASHCARD.value, StudyItemType.QUIZ.value):
        parts = text.split(CONTENT_DELIMITER)
        if len(parts) > 1:
            text = parts[1].strip()

    return text[:max_chars]
