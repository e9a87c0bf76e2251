# =============================================================================
# core/services/collection_service.py - Collection Business Logic
# =============================================================================
# Handles collection CRUD and the per-collection listings of study items
# and flashcard sets. Every lookup is scoped to the owning user.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import utc_now_iso
from core.models.activity import ActivityType, ItemType
from core.models.collection import CollectionRequest
from core.services.activity_service import ActivityService
from app.exceptions import BadRequestError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

TABLE = "collections"

# PostgREST embedded aggregate: item_count -> [{"count": n}]
COLUMNS_WITH_COUNT = "*, item_count:study_items(count)"


def _format_collection(row: dict[str, Any]) -> dict[str, Any]:
    """Flatten the embedded item_count aggregate into an integer."""
    formatted = dict(row)
    count = row.get("item_count")
    if isinstance(count, list):
        formatted["item_count"] = count[0].get("count", 0) if count else 0
    elif count is None:
        formatted["item_count"] = 0
    return formatted


def _require_title(request: CollectionRequest) -> str:
    title = (request.title or "").strip()
    if not title:
        raise BadRequestError("Please provide a title")
    return title


class CollectionService:
    """
    Service for collection management operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_collections(user_id: UUID | str) -> list[dict[str, Any]]:
        """
        List the user's collections, newest first, with item counts.
        """
        try:
            rows = SupabaseClient.select_rows(
                TABLE,
                columns=COLUMNS_WITH_COUNT,
                filters={"user_id": str(user_id)},
                order_by="created_at",
                desc=True,
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error fetching collections", str(e))

        return [_format_collection(row) for row in rows]

    @staticmethod
    def get_owned(
        collection_id: str,
        user_id: UUID | str,
        columns: str = "*",
    ) -> dict[str, Any]:
        """
        Get a collection the user owns.

        Raises:
            NotFoundError: If it doesn't exist or belongs to someone else
        """
        try:
            row = SupabaseClient.fetch_row(
                TABLE,
                filters={"id": collection_id, "user_id": str(user_id)},
                columns=columns,
            )
        except SupabaseClientError as e:
            # Malformed ids surface as query errors; treat them as missing
            logger.warning(f"Collection lookup failed for {collection_id}: {e}")
            row = None

        if not row:
            raise NotFoundError("Collection")
        return row

    @staticmethod
    def get_collection(collection_id: str, user_id: UUID | str) -> dict[str, Any]:
        """Get one collection with its item count."""
        row = CollectionService.get_owned(collection_id, user_id, columns=COLUMNS_WITH_COUNT)
        return _format_collection(row)

    @staticmethod
    def create_collection(
        user_id: UUID | str,
        request: CollectionRequest,
    ) -> dict[str, Any]:
        """
        Create a collection and log the activity.

        Raises:
            BadRequestError: If title is missing
        """
        title = _require_title(request)

        try:
            collection = SupabaseClient.insert_row(TABLE, {
                "user_id": str(user_id),
                "title": title,
                "description": request.description,
                "color": request.color,
                "icon": request.icon,
            })
        except SupabaseClientError as e:
            raise DatabaseError("Error creating collection", str(e))

        logger.info(f"Created collection: {collection['id']} for user: {user_id}")

        ActivityService.record(
            user_id,
            ActivityType.CREATE,
            ItemType.COLLECTION,
            item_id=collection["id"],
            item_title=collection["title"],
        )

        return {**collection, "item_count": 0}

    @staticmethod
    def update_collection(
        collection_id: str,
        user_id: UUID | str,
        request: CollectionRequest,
    ) -> dict[str, Any]:
        """
        Update a collection's display fields.

        Optional fields left out of the request keep their stored values.

        Raises:
            BadRequestError: If title is missing
            NotFoundError: If the user doesn't own the collection
        """
        title = _require_title(request)
        CollectionService.get_owned(collection_id, user_id)

        try:
            SupabaseClient.update_rows(
                TABLE,
                {
                    **request.model_dump(include={"description", "color", "icon"}, exclude_unset=True),
                    "title": title,
                    "updated_at": utc_now_iso(),
                },
                filters={"id": collection_id, "user_id": str(user_id)},
            )
            updated = SupabaseClient.fetch_row(
                TABLE,
                filters={"id": collection_id},
                columns=COLUMNS_WITH_COUNT,
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error updating collection", str(e))

        if not updated:
            raise DatabaseError("Error updating collection", "row vanished after update")

        logger.info(f"Updated collection: {collection_id}")

        ActivityService.record(
            user_id,
            ActivityType.EDIT,
            ItemType.COLLECTION,
            item_id=updated["id"],
            item_title=updated["title"],
        )

        return _format_collection(updated)

    @staticmethod
    def delete_collection(collection_id: str, user_id: UUID | str) -> None:
        """
        Delete a collection.

        Child rows (study items, flashcard sets) are removed by the
        database's ON DELETE CASCADE foreign keys.

        Raises:
            NotFoundError: If the user doesn't own the collection
        """
        existing = CollectionService.get_owned(collection_id, user_id)

        try:
            SupabaseClient.delete_rows(TABLE, filters={"id": collection_id, "user_id": str(user_id)})
        except SupabaseClientError as e:
            raise DatabaseError("Error deleting collection", str(e))

        logger.info(f"Deleted collection: {collection_id}")

        ActivityService.record(
            user_id,
            ActivityType.DELETE,
            ItemType.COLLECTION,
            item_id=collection_id,
            item_title=existing.get("title"),
        )

    @staticmethod
    def list_items(collection_id: str, user_id: UUID | str) -> list[dict[str, Any]]:
        """Study items in an owned collection, newest first."""
        CollectionService.get_owned(collection_id, user_id)

        try:
            return SupabaseClient.select_rows(
                "study_items",
                filters={"collection_id": collection_id},
                order_by="created_at",
                desc=True,
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error fetching study items", str(e))

    @staticmethod
    def list_flashcard_sets(collection_id: str, user_id: UUID | str) -> list[dict[str, Any]]:
        """Flashcard sets (with cards) in an owned collection, newest first."""
        CollectionService.get_owned(collection_id, user_id)

        # Imported here to keep the two services from importing each other at load time
        from core.services.flashcard_service import SET_COLUMNS_WITH_CARDS

        try:
            return SupabaseClient.select_rows(
                "flashcard_sets",
                columns=SET_COLUMNS_WITH_CARDS,
                filters={"collection_id": collection_id},
                order_by="created_at",
                desc=True,
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error fetching flashcard sets", str(e))
