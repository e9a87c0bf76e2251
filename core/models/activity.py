# =============================================================================
# core/models/activity.py - Activity Log Schemas
# =============================================================================
# Activities are the audit trail behind the dashboard's "recent activity".
# One row is written per create/edit/delete/study/ai_generate action.
# =============================================================================

from enum import Enum


class ActivityType(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    STUDY = "study"
    AI_GENERATE = "ai_generate"


class ItemType(str, Enum):
    """
    What an activity refers to.

    Study items log their own type (note/flashcard/quiz).
    """
    COLLECTION = "collection"
    NOTE = "note"
    FLASHCARD = "flashcard"
    QUIZ = "quiz"
    FLASHCARD_SET = "flashcard_set"
    SUMMARY = "summary"
    TUTOR = "tutor"
    AUDIO = "audio"
