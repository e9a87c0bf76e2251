# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles uploads of generated audio to Supabase Storage and resolves the
# public URLs the client plays them from.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageUploadError

logger = logging.getLogger(__name__)

AUDIO_CONTENT_TYPE = "audio/mpeg"
AUDIO_CACHE_SECONDS = "3600"


class StorageService:
    """
    Service for Supabase Storage operations.
    """

    @staticmethod
    def upload_audio(
        path: str,
        content: bytes,
        bucket: str | None = None,
    ) -> str:
        """
        Upload an mp3 and return its public URL.

        Args:
            path: Object path inside the bucket (e.g. "audio_<id>_<ms>.mp3")
            content: Raw audio bytes
            bucket: Bucket name (default: settings.AUDIO_BUCKET)

        Returns:
            Public URL of the uploaded file

        Raises:
            StorageUploadError: If upload fails
        """
        bucket = bucket or settings.AUDIO_BUCKET
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": AUDIO_CONTENT_TYPE,
                    "cache-control": AUDIO_CACHE_SECONDS,
                }
            )
            logger.info(f"Uploaded audio to storage: {bucket}/{path} ({len(content)} bytes)")

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        return StorageService.get_public_url(path, bucket=bucket)

    @staticmethod
    def get_public_url(path: str, bucket: str | None = None) -> str:
        """
        Get a public URL for a storage file.
        """
        bucket = bucket or settings.AUDIO_BUCKET
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def path_from_public_url(url: str, bucket: str | None = None) -> str | None:
        """
        Recover the object path from a public URL.

        Public URLs look like <project>/storage/v1/object/public/<bucket>/<path>.
        Returns None for URLs that don't point into the bucket.
        """
        bucket = bucket or settings.AUDIO_BUCKET
        marker = f"/object/public/{bucket}/"
        if not url or marker not in url:
            return None
        path = url.split(marker, 1)[1].split("?", 1)[0]
        return path or None

    @staticmethod
    def delete_file(path: str, bucket: str | None = None) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if deleted successfully
        """
        bucket = bucket or settings.AUDIO_BUCKET
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove([path])
            logger.info(f"Deleted file from storage: {bucket}/{path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            return False
