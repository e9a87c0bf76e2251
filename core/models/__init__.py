# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: The {success, data, error} response envelope
# - user.py: Account, credential and profile schemas
# - collection.py: Collection bodies
# - study_item.py: Study item bodies and the audio text rule
# - flashcard.py: Flashcard set bodies and study session results
# - activity.py: Activity/item type enums for the audit log
# - ai.py: AI feature bodies and the generated-flashcards contract
#
# These models define the "contract" between API and clients.
# =============================================================================

from .common import ok
from .user import (
    AuthPayload,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserPreferences,
    UserPublic,
    UserUpdateRequest,
)
from .collection import CollectionRequest
from .study_item import (
    CONTENT_DELIMITER,
    StudyItemCreateRequest,
    StudyItemType,
    StudyItemUpdateRequest,
    StudyRecordRequest,
    speech_text_for_item,
)
from .flashcard import (
    Difficulty,
    FlashcardInput,
    FlashcardSetCreateRequest,
    FlashcardSetUpdateRequest,
    StudySessionResults,
)
from .activity import ActivityType, ItemType
from .ai import (
    AIResponseType,
    GeneratedCard,
    GeneratedFlashcards,
    GenerateFlashcardsRequest,
    SummarizeRequest,
    TextToSpeechRequest,
    TutorRequest,
)

__all__ = [
    # Envelope
    "ok",
    # Users
    "AuthPayload",
    "ForgotPasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "UserPreferences",
    "UserPublic",
    "UserUpdateRequest",
    # Collections
    "CollectionRequest",
    # Study items
    "CONTENT_DELIMITER",
    "StudyItemCreateRequest",
    "StudyItemType",
    "StudyItemUpdateRequest",
    "StudyRecordRequest",
    "speech_text_for_item",
    # Flashcards
    "Difficulty",
    "FlashcardInput",
    "FlashcardSetCreateRequest",
    "FlashcardSetUpdateRequest",
    "StudySessionResults",
    # Activity
    "ActivityType",
    "ItemType",
    # AI
    "AIResponseType",
    "GeneratedCard",
    "GeneratedFlashcards",
    "GenerateFlashcardsRequest",
    "SummarizeRequest",
    "TextToSpeechRequest",
    "TutorRequest",
]
