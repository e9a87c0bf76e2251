# =============================================================================
# core/services/study_item_service.py - Study Item Business Logic
# =============================================================================
# Handles study item CRUD, study-pass tracking and audio generation.
# Every lookup is scoped to the owning user.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import epoch_ms, utc_now_iso
from core.models.activity import ActivityType
from core.models.study_item import (
    StudyItemCreateRequest,
    StudyItemType,
    StudyItemUpdateRequest,
    speech_text_for_item,
)
from core.services.activity_service import ActivityService
from core.services.collection_service import CollectionService
from core.services.speech_service import SpeechService
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import BadRequestError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

TABLE = "study_items"


def _validate_type(item_type: str) -> str:
    if item_type not in StudyItemType.values():
        raise BadRequestError(
            "Invalid study item type",
            details={"allowed_types": StudyItemType.values()},
        )
    return item_type


def audio_filename(item_id: str) -> str:
    """Storage object name for an item's generated audio."""
    return f"audio_{item_id}_{epoch_ms()}.mp3"


class StudyItemService:
    """
    Service for study item operations.
    """

    @staticmethod
    def get_owned(item_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        Get a study item the user owns.

        Raises:
            NotFoundError: If it doesn't exist or belongs to someone else
        """
        try:
            row = SupabaseClient.fetch_row(
                TABLE,
                filters={"id": item_id, "user_id": str(user_id)},
            )
        except SupabaseClientError as e:
            logger.warning(f"Study item lookup failed for {item_id}: {e}")
            row = None

        if not row:
            raise NotFoundError("Study item")
        return row

    @staticmethod
    def create_item(
        user_id: UUID | str,
        request: StudyItemCreateRequest,
    ) -> dict[str, Any]:
        """
        Create a study item inside an owned collection.

        Raises:
            BadRequestError: If required fields are missing or type is unknown
            NotFoundError: If the collection isn't the user's
        """
        if not (request.title and request.content and request.type and request.collection_id):
            raise BadRequestError("Please provide title, content, type, and collection_id")
        item_type = _validate_type(request.type)

        CollectionService.get_owned(request.collection_id, user_id)

        try:
            item = SupabaseClient.insert_row(TABLE, {
                "user_id": str(user_id),
                "collection_id": request.collection_id,
                "title": request.title,
                "content": request.content,
                "type": item_type,
                "tags": request.tags or [],
            })
        except SupabaseClientError as e:
            raise DatabaseError("Error creating study item", str(e))

        logger.info(f"Created {item_type} study item: {item['id']} in collection: {request.collection_id}")

        ActivityService.record(
            user_id,
            ActivityType.CREATE,
            item_type,
            item_id=item["id"],
            item_title=item["title"],
            collection_id=request.collection_id,
        )

        return item

    @staticmethod
    def update_item(
        item_id: str,
        user_id: UUID | str,
        request: StudyItemUpdateRequest,
    ) -> dict[str, Any]:
        """
        Replace a study item's title, content and type. Tags change only when sent.

        Raises:
            BadRequestError: If title, content or type is missing
            NotFoundError: If the user doesn't own the item
        """
        if not (request.title and request.content and request.type):
            raise BadRequestError("Please provide title, content, and type")
        item_type = _validate_type(request.type)

        StudyItemService.get_owned(item_id, user_id)

        try:
            rows = SupabaseClient.update_rows(
                TABLE,
                {
                    "title": request.title,
                    "content": request.content,
                    "type": item_type,
                    **({"tags": request.tags or []} if "tags" in request.model_fields_set else {}),
                    "updated_at": utc_now_iso(),
                },
                filters={"id": item_id, "user_id": str(user_id)},
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error updating study item", str(e))

        if not rows:
            raise DatabaseError("Error updating study item", "update matched no rows")
        updated = rows[0]

        ActivityService.record(
            user_id,
            ActivityType.EDIT,
            item_type,
            item_id=updated["id"],
            item_title=updated["title"],
            collection_id=updated.get("collection_id"),
        )

        return updated

    @staticmethod
    def delete_item(item_id: str, user_id: UUID | str) -> None:
        """
        Delete a study item and its stored audio, if any.

        Raises:
            NotFoundError: If the user doesn't own the item
        """
        existing = StudyItemService.get_owned(item_id, user_id)

        try:
            SupabaseClient.delete_rows(TABLE, filters={"id": item_id, "user_id": str(user_id)})
        except SupabaseClientError as e:
            raise DatabaseError("Error deleting study item", str(e))

        logger.info(f"Deleted study item: {item_id}")

        audio_path = StorageService.path_from_public_url(existing.get("audio_url") or "")
        if audio_path:
            StorageService.delete_file(audio_path)

        ActivityService.record(
            user_id,
            ActivityType.DELETE,
            existing.get("type", StudyItemType.NOTE.value),
            item_id=item_id,
            item_title=existing.get("title"),
            collection_id=existing.get("collection_id"),
        )

    @staticmethod
    def record_study(
        item_id: str,
        user_id: UUID | str,
        duration: int | None = None,
    ) -> dict[str, Any]:
        """
        Count one study pass over an item.

        Bumps study_count, stamps last_studied and logs a study activity.
        """
        existing = StudyItemService.get_owned(item_id, user_id)

        try:
            rows = SupabaseClient.update_rows(
                TABLE,
                {
                    "study_count": (existing.get("study_count") or 0) + 1,
                    "last_studied": utc_now_iso(),
                },
                filters={"id": item_id, "user_id": str(user_id)},
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error updating study item", str(e))

        updated = rows[0] if rows else existing

        ActivityService.record(
            user_id,
            ActivityType.STUDY,
            existing.get("type", StudyItemType.NOTE.value),
            item_id=item_id,
            item_title=existing.get("title"),
            collection_id=existing.get("collection_id"),
            duration=duration,
        )

        return updated

    @staticmethod
    def generate_audio(item_id: str, user_id: UUID | str) -> str:
        """
        Read a study item aloud and attach the mp3 to it.

        Flashcard and quiz items are read from their answer part. The text is
        capped at TTS_MAX_CHARS before it is sent to the speech vendor.

        Returns:
            Public URL of the stored audio
        """
        item = StudyItemService.get_owned(item_id, user_id)

        text = speech_text_for_item(item.get("type", ""), item.get("content", ""), settings.TTS_MAX_CHARS)
        audio_url = SpeechService.synthesize_to_storage(text, audio_filename(item_id))

        try:
            SupabaseClient.update_rows(
                TABLE,
                {"audio_url": audio_url, "updated_at": utc_now_iso()},
                filters={"id": item_id, "user_id": str(user_id)},
            )
        except SupabaseClientError as e:
            raise DatabaseError("Error saving audio URL", str(e))

        logger.info(f"Generated audio for study item: {item_id}")
        return audio_url
