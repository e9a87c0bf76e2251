# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the study domain logic:
# - models/: Pydantic schemas for request bodies and shared shapes
# - services/: One service per entity (users, collections, study items,
#   flashcards, activity, AI, speech, storage)
#
# Services raise the error types from app/exceptions.py and never touch
# Request/Response objects, so they can be called and tested directly.
# =============================================================================
