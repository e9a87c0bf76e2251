# =============================================================================
# core/services/flashcard_service.py - Flashcard Set Business Logic
# =============================================================================
# Handles flashcard set CRUD (sets and their cards travel together) and
# study session bookkeeping. Every lookup is scoped to the owning user.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import utc_now_iso
from core.models.activity import ActivityType, ItemType
from core.models.flashcard import (
    FlashcardInput,
    FlashcardSetCreateRequest,
    FlashcardSetUpdateRequest,
    StudySessionResults,
)
from core.services.activity_service import ActivityService
from core.services.collection_service import CollectionService
from app.exceptions import BadRequestError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

SETS_TABLE = "flashcard_sets"
CARDS_TABLE = "flashcards"

# PostgREST embed: the set's cards arrive under "cards"
SET_COLUMNS_WITH_CARDS = "*, cards:flashcards(*)"


def _validate_cards(cards: list[FlashcardInput]) -> None:
    for index, card in enumerate(cards):
        if not (card.question and card.question.strip() and card.answer and card.answer.strip()):
            raise BadRequestError(
                "Each card needs a question and an answer",
                details={"card_index": index},
            )


class FlashcardService:
    """
    Service for flashcard set operations.
    """

    @staticmethod
    def list_sets(user_id: UUID | str) -> list[dict[str, Any]]:
        """All of the user's sets with their cards, newest first."""
        try:
            return SupabaseClient.select_rows(
                SETS_TABLE,
                columns=SET_COLUMNS_WITH_CARDS,
                filters={"user_id": str(user_id)},
                order_by="created_at",
                desc=True,
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error fetching flashcard sets", str(e))

    @staticmethod
    def get_owned(
        set_id: str,
        user_id: UUID | str,
        columns: str = "*",
    ) -> dict[str, Any]:
        """
        Get a set the user owns.

        Raises:
            NotFoundError: If it doesn't exist or belongs to someone else
        """
        try:
            row = SupabaseClient.fetch_row(
                SETS_TABLE,
                filters={"id": set_id, "user_id": str(user_id)},
                columns=columns,
            )
        except SupabaseClientError as e:
            logger.warning(f"Flashcard set lookup failed for {set_id}: {e}")
            row = None

        if not row:
            raise NotFoundError("Flashcard set")
        return row

    @staticmethod
    def get_set(set_id: str, user_id: UUID | str) -> dict[str, Any]:
        """One set with its cards."""
        return FlashcardService.get_owned(set_id, user_id, columns=SET_COLUMNS_WITH_CARDS)

    @staticmethod
    def _insert_cards(set_id: str, cards: list[FlashcardInput], action: str) -> list[dict[str, Any]]:
        try:
            return SupabaseClient.insert_rows(CARDS_TABLE, [card.to_row(set_id) for card in cards])
        except SupabaseClientError as e:
            raise DatabaseError(f"Error {action} flashcards", str(e))

    @staticmethod
    def create_set(
        user_id: UUID | str,
        request: FlashcardSetCreateRequest,
        activity_type: ActivityType = ActivityType.CREATE,
    ) -> dict[str, Any]:
        """
        Create a set and its cards.

        Args:
            user_id: Owner
            request: Title, optional description/collection, non-empty cards
            activity_type: create for user-made sets, ai_generate for AI output

        Raises:
            BadRequestError: If title or cards are missing
            NotFoundError: If collection_id is given but not the user's
        """
        title = (request.title or "").strip()
        if not title or not request.cards:
            raise BadRequestError("Please provide title and cards array")
        _validate_cards(request.cards)

        if request.collection_id:
            CollectionService.get_owned(request.collection_id, user_id)

        try:
            flashcard_set = SupabaseClient.insert_row(SETS_TABLE, {
                "user_id": str(user_id),
                "collection_id": request.collection_id,
                "title": title,
                "description": request.description,
            })
        except SupabaseClientError as e:
            raise DatabaseError("Error creating flashcard set", str(e))

        cards = FlashcardService._insert_cards(flashcard_set["id"], request.cards, "creating")

        logger.info(f"Created flashcard set: {flashcard_set['id']} with {len(cards)} cards")

        ActivityService.record(
            user_id,
            activity_type,
            ItemType.FLASHCARD_SET,
            item_id=flashcard_set["id"],
            item_title=flashcard_set["title"],
            collection_id=request.collection_id,
        )

        return {**flashcard_set, "cards": cards}

    @staticmethod
    def update_set(
        set_id: str,
        user_id: UUID | str,
        request: FlashcardSetUpdateRequest,
    ) -> dict[str, Any]:
        """
        Update a set's title/description, replacing its cards when given.

        Raises:
            BadRequestError: If title is missing or a card is incomplete
            NotFoundError: If the user doesn't own the set
        """
        title = (request.title or "").strip()
        if not title:
            raise BadRequestError("Please provide title")
        if request.cards is not None:
            _validate_cards(request.cards)

        FlashcardService.get_owned(set_id, user_id)

        try:
            rows = SupabaseClient.update_rows(
                SETS_TABLE,
                {
                    **request.model_dump(include={"description"}, exclude_unset=True),
                    "title": title,
                    "updated_at": utc_now_iso(),
                },
                filters={"id": set_id, "user_id": str(user_id)},
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error updating flashcard set", str(e))

        if not rows:
            raise DatabaseError("Error updating flashcard set", "update matched no rows")
        updated = dict(rows[0])

        if request.cards is not None:
            try:
                SupabaseClient.delete_rows(CARDS_TABLE, filters={"set_id": set_id})
            except SupabaseClientError as e:
                raise DatabaseError("Error updating flashcards", str(e))
            updated["cards"] = FlashcardService._insert_cards(set_id, request.cards, "updating")
        else:
            try:
                updated["cards"] = SupabaseClient.select_rows(CARDS_TABLE, filters={"set_id": set_id})
            except SupabaseClientError as e:
                raise DatabaseError("Error fetching flashcards", str(e))

        ActivityService.record(
            user_id,
            ActivityType.EDIT,
            ItemType.FLASHCARD_SET,
            item_id=updated["id"],
            item_title=updated["title"],
            collection_id=updated.get("collection_id"),
        )

        return updated

    @staticmethod
    def delete_set(set_id: str, user_id: UUID | str) -> None:
        """
        Delete a set's cards, then the set.

        Raises:
            NotFoundError: If the user doesn't own the set
        """
        existing = FlashcardService.get_owned(set_id, user_id)

        try:
            SupabaseClient.delete_rows(CARDS_TABLE, filters={"set_id": set_id})
            SupabaseClient.delete_rows(SETS_TABLE, filters={"id": set_id, "user_id": str(user_id)})
        except SupabaseClientError as e:
            raise DatabaseError("Error deleting flashcard set", str(e))

        logger.info(f"Deleted flashcard set: {set_id}")

        ActivityService.record(
            user_id,
            ActivityType.DELETE,
            ItemType.FLASHCARD_SET,
            item_id=set_id,
            item_title=existing.get("title"),
            collection_id=existing.get("collection_id"),
        )

    @staticmethod
    def record_study_session(
        set_id: str,
        user_id: UUID | str,
        results: StudySessionResults,
    ) -> dict[str, Any]:
        """
        Record a finished study session over a set.

        Bumps the set's study_count and last_studied, bumps review_count and
        last_reviewed on every reviewed card that belongs to the set, and logs
        a study activity with the session duration.

        Returns:
            {"set": <updated set with cards>, "results": <echoed results>}
        """
        existing = FlashcardService.get_set(set_id, user_id)
        now = utc_now_iso()

        try:
            SupabaseClient.update_rows(
                SETS_TABLE,
                {
                    "study_count": (existing.get("study_count") or 0) + 1,
                    "last_studied": now,
                },
                filters={"id": set_id, "user_id": str(user_id)},
            )

            cards_by_id = {str(card["id"]): card for card in existing.get("cards") or []}
            for card_id in dict.fromkeys(results.card_ids):
                card = cards_by_id.get(card_id)
                if card is None:
                    continue
                SupabaseClient.update_rows(
                    CARDS_TABLE,
                    {
                        "review_count": (card.get("review_count") or 0) + 1,
                        "last_reviewed": now,
                    },
                    filters={"id": card_id, "set_id": set_id},
                )
        except SupabaseClientError as e:
            raise DatabaseError("Error recording study session", str(e))

        ActivityService.record(
            user_id,
            ActivityType.STUDY,
            ItemType.FLASHCARD_SET,
            item_id=set_id,
            item_title=existing.get("title"),
            collection_id=existing.get("collection_id"),
            duration=results.duration,
        )

        logger.info(
            f"Recorded study session on set {set_id}: "
            f"{results.correct_count}/{results.total_cards} correct"
        )

        return {
            "set": FlashcardService.get_set(set_id, user_id),
            "results": results.model_dump(),
        }
