# =============================================================================
# core/services/speech_service.py - Text-to-Speech (ElevenLabs)
# =============================================================================
# Turns study text into an mp3 via the ElevenLabs REST API and stores the
# result in Supabase Storage.
#
# One synthesis request per call; no retries. Failures are logged and
# surfaced as a generic server error.
# =============================================================================

import logging

import httpx

from app.config import settings
from app.exceptions import BadRequestError, VendorError
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.5,
}


class SpeechService:
    """
    Service for speech synthesis.
    """

    @staticmethod
    def clip_text(text: str) -> str:
        """Truncate text to the synthesis limit (TTS_MAX_CHARS)."""
        return text[: settings.TTS_MAX_CHARS]

    @staticmethod
    def synthesize(text: str) -> bytes:
        """
        Synthesize speech for text.

        Args:
            text: Text to read; truncated to TTS_MAX_CHARS

        Returns:
            mp3 bytes

        Raises:
            BadRequestError: If there is nothing to read
            VendorError: If the API key is missing or the call fails
        """
        text = SpeechService.clip_text(text or "").strip()
        if not text:
            raise BadRequestError("No text available to convert to speech")

        if not settings.ELEVENLABS_API_KEY:
            raise VendorError("elevenlabs", "ELEVENLABS_API_KEY is not configured")

        url = f"{settings.ELEVENLABS_BASE_URL.rstrip('/')}/text-to-speech/{settings.ELEVENLABS_VOICE_ID}"

        try:
            response = httpx.post(
                url,
                json={
                    "text": text,
                    "model_id": settings.ELEVENLABS_MODEL_ID,
                    "voice_settings": VOICE_SETTINGS,
                },
                headers={
                    "Content-Type": "application/json",
                    "Accept": "audio/mpeg",
                    "xi-api-key": settings.ELEVENLABS_API_KEY,
                },
                timeout=settings.TTS_TIMEOUT_SECONDS,
            )
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs returned {e.response.status_code}: {e.response.text[:200]}")
            raise VendorError("elevenlabs", f"HTTP {e.response.status_code}")

        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs request failed: {e}")
            raise VendorError("elevenlabs", str(e))

        logger.info(f"Synthesized {len(text)} characters into {len(response.content)} bytes of audio")
        return response.content

    @staticmethod
    def synthesize_to_storage(text: str, filename: str) -> str:
        """
        Synthesize text and upload the mp3.

        Args:
            text: Text to read
            filename: Object name in the audio bucket

        Returns:
            Public URL of the stored file
        """
        audio = SpeechService.synthesize(text)
        return StorageService.upload_audio(filename, audio)
