# =============================================================================
# core/services/activity_service.py - Activity Log
# =============================================================================
# Writes and reads the per-user audit trail (activities table).
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from core.models.activity import ActivityType, ItemType

logger = logging.getLogger(__name__)

TABLE = "activities"
DEFAULT_LIMIT = 10


class ActivityService:
    """
    Service for activity log operations.

    Recording is a side effect of the primary operation: a failed insert is
    logged and swallowed so the user's create/edit/delete still succeeds.
    """

    @staticmethod
    def record(
        user_id: UUID | str,
        activity_type: ActivityType,
        item_type: ItemType | str,
        item_id: str | None,
        item_title: str | None,
        collection_id: str | None = None,
        duration: int | None = None,
    ) -> dict[str, Any] | None:
        """
        Append one activity row.

        Args:
            user_id: Acting user
            activity_type: create, edit, delete, study or ai_generate
            item_type: What was acted on (study items pass their own type)
            item_id: Row id of the item (None for unsaved AI output)
            item_title: Title at the time of the action
            collection_id: Owning collection, when there is one
            duration: Seconds, for study activities

        Returns:
            Inserted row, or None if the insert failed
        """
        row: dict[str, Any] = {
            "user_id": str(user_id),
            "activity_type": activity_type.value,
            "item_type": item_type.value if isinstance(item_type, ItemType) else item_type,
            "item_id": item_id,
            "item_title": item_title,
        }
        if collection_id:
            row["collection_id"] = collection_id
        if duration is not None:
            row["duration"] = duration

        try:
            return SupabaseClient.insert_row(TABLE, row)
        except SupabaseClientError as e:
            logger.error(f"Failed to record {activity_type.value} activity for user {user_id}: {e}")
            return None

    @staticmethod
    def list_recent(
        user_id: UUID | str,
        limit: int = DEFAULT_LIMIT,
    ) -> list[dict[str, Any]]:
        """
        The user's most recent activities, newest first.
        """
        return SupabaseClient.select_rows(
            TABLE,
            filters={"user_id": str(user_id)},
            order_by="created_at",
            desc=True,
            limit=limit,
        )
