# =============================================================================
# core/models/flashcard.py - Flashcard Set Schemas
# =============================================================================
# These models define the API contract for flashcard sets:
# - FlashcardInput: one question/answer pair in a request
# - FlashcardSetCreateRequest / FlashcardSetUpdateRequest: set bodies
# - StudySessionResults: what the client reports after a study session
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class FlashcardInput(BaseModel):
    """
    One card in a create/update request.

    Example:
        {"question": "Powerhouse of the cell?", "answer": "Mitochondria", "difficulty": "easy"}
    """
    question: str | None = None
    answer: str | None = None
    tags: list[str] | None = None
    difficulty: Difficulty | None = None

    def to_row(self, set_id: str) -> dict:
        return {
            "set_id": set_id,
            "question": self.question,
            "answer": self.answer,
            "tags": self.tags or [],
            "difficulty": self.difficulty.value if self.difficulty else None,
        }


class FlashcardSetCreateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    collection_id: str | None = None
    cards: list[FlashcardInput] | None = None


class FlashcardSetUpdateRequest(BaseModel):
    """
    Set update. When cards is a list the set's cards are replaced wholesale;
    when it is omitted the existing cards are kept.
    """
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    cards: list[FlashcardInput] | None = None


class StudySessionResults(BaseModel):
    """
    Outcome of a completed study session over a set.

    Example:
        {"total_cards": 10, "correct_count": 7, "incorrect_count": 2,
         "skipped_count": 1, "duration": 240, "card_ids": ["..."]}
    """
    total_cards: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    skipped_count: int = Field(default=0, ge=0)

    duration: int | None = Field(
        default=None,
        ge=0,
        description="Seconds spent in the session"
    )

    # Cards that were reviewed; their review counters are bumped
    card_ids: list[str] = Field(default_factory=list)
