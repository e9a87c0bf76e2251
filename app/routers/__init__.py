# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - collections.py: Collection CRUD and collection contents
# - study_items.py: Study item CRUD, audio and study tracking
# - flashcards.py: Flashcard set CRUD and study sessions
# - ai.py: AI flashcards, summaries, tutoring and text-to-speech
# - activity.py: Recent activity feed
#
# Authentication routes live in app/auth/routes.py.
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import collections
from . import study_items
from . import flashcards
from . import ai
from . import activity

__all__ = [
    "health",
    "collections",
    "study_items",
    "flashcards",
    "ai",
    "activity",
]
