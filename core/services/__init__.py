# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .activity_service import ActivityService
from .storage_service import StorageService
from .speech_service import SpeechService
from .user_service import UserService
from .collection_service import CollectionService
from .study_item_service import StudyItemService
from .flashcard_service import FlashcardService
from .ai_service import AIService

__all__ = [
    "ActivityService",
    "StorageService",
    "SpeechService",
    "UserService",
    "CollectionService",
    "StudyItemService",
    "FlashcardService",
    "AIService",
]
