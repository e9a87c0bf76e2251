# =============================================================================
# core/services/ai_service.py - AI Study Tools
# =============================================================================
# Generates flashcards, summaries and tutor answers with the OpenAI Chat
# Completions API, and reads text aloud through SpeechService.
#
# Every call is a single request to the vendor: no retries, no caching.
# Each successful generation is stored in ai_responses and logged as an
# ai_generate activity.
# =============================================================================

import json
import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import BadRequestError, VendorError
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import epoch_ms
from core.models.activity import ActivityType, ItemType
from core.models.ai import AIResponseType, GeneratedCard, GeneratedFlashcards
from core.models.flashcard import Difficulty, FlashcardInput, FlashcardSetCreateRequest
from core.services.activity_service import ActivityService
from core.services.collection_service import CollectionService
from core.services.flashcard_service import FlashcardService
from core.services.speech_service import SpeechService

logger = logging.getLogger(__name__)

AI_RESPONSES_TABLE = "ai_responses"
AI_GENERATED_DESCRIPTION = "Generated from AI"

# Lazy-loaded OpenAI client
_client = None


def get_openai_client():
    """Get or create OpenAI client (lazy initialization)."""
    global _client
    if _client is None:
        from openai import OpenAI
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


# =============================================================================
# Prompts
# =============================================================================

FLASHCARD_SYSTEM_PROMPT = """You turn study material into flashcards.

Return a JSON object with exactly this shape:
{{"title": "<short title for the set>", "cards": [{{"question": "...", "answer": "...", "difficulty": "easy|medium|hard"}}]}}

Rules:
- Write at most {max_cards} cards
- One fact or concept per card
- Questions must be answerable from the material alone
- Answers are short: one or two sentences
- Use the language of the material"""

SUMMARY_SYSTEM_PROMPT = """You summarize study material for a student.

- Start with a one-sentence overview
- Follow with the key points as a short bulleted list
- Keep definitions, names, dates and formulas exactly as written
- Do not add facts that are not in the material"""

TUTOR_SYSTEM_PROMPT = """You are a patient tutor helping a student study.

- Answer the question clearly and correctly
- Explain the reasoning in small steps when the question needs it
- Use a short example when it helps understanding
- If the question is ambiguous, answer the most likely reading and say so
- Keep the answer under 300 words"""


def _clip_input(text: str) -> str:
    """Cap study text at AI_MAX_INPUT_CHARS."""
    return text[: settings.AI_MAX_INPUT_CHARS]


def _normalize_difficulty(value: Any) -> str | None:
    if isinstance(value, str) and value.strip().lower() in {d.value for d in Difficulty}:
        return value.strip().lower()
    return None


def parse_generated_flashcards(raw: str, max_cards: int) -> GeneratedFlashcards:
    """
    Parse the model's JSON into a flashcard set.

    Cards missing a question or answer are dropped; at most max_cards are
    kept. A reply that isn't JSON or yields no usable cards is a vendor
    failure.

    Raises:
        VendorError: If no flashcards can be recovered
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise VendorError("openai", f"Flashcard reply is not JSON: {e}", message="AI returned no flashcards")

    if not isinstance(data, dict):
        raise VendorError("openai", "Flashcard reply is not an object", message="AI returned no flashcards")

    cards: list[GeneratedCard] = []
    for raw_card in data.get("cards") or []:
        if not isinstance(raw_card, dict):
            continue
        question = str(raw_card.get("question") or "").strip()
        answer = str(raw_card.get("answer") or "").strip()
        if not question or not answer:
            continue
        cards.append(GeneratedCard(
            question=question,
            answer=answer,
            difficulty=_normalize_difficulty(raw_card.get("difficulty")),
        ))
        if len(cards) >= max_cards:
            break

    if not cards:
        raise VendorError("openai", "Flashcard reply held no usable cards", message="AI returned no flashcards")

    title = str(data.get("title") or "").strip() or GeneratedFlashcards.model_fields["title"].default
    return GeneratedFlashcards(title=title[:200], cards=cards)


class AIService:
    """
    Service for AI-assisted study features.
    """

    # -------------------------------------------------------------------------
    # Vendor call
    # -------------------------------------------------------------------------

    @staticmethod
    def _complete(
        system_prompt: str,
        user_content: str,
        json_mode: bool = False,
        max_tokens: int = 1500,
    ) -> str:
        """
        One chat completion.

        Raises:
            VendorError: If the API call fails or returns no content
        """
        kwargs: dict[str, Any] = {
            "model": settings.OPENAI_MODEL,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": settings.OPENAI_TEMPERATURE,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            client = get_openai_client()
            response = client.chat.completions.create(**kwargs)
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise VendorError("openai", str(e))

        if not content or not content.strip():
            raise VendorError("openai", "Empty completion")

        logger.debug(f"OpenAI response: {content[:200]}...")
        return content.strip()

    # -------------------------------------------------------------------------
    # Bookkeeping
    # -------------------------------------------------------------------------

    @staticmethod
    def _store_response(
        user_id: UUID | str,
        response_type: AIResponseType,
        prompt: str,
        response: str,
        collection_id: str | None = None,
        saved: bool = False,
    ) -> None:
        """Keep a copy of the exchange in ai_responses; failures are only logged."""
        try:
            SupabaseClient.insert_row(AI_RESPONSES_TABLE, {
                "user_id": str(user_id),
                "type": response_type.value,
                "prompt": prompt,
                "response": response,
                "collection_id": collection_id,
                "saved": saved,
            })
        except SupabaseClientError as e:
            logger.error(f"Failed to store {response_type.value} AI response: {e}")

    @staticmethod
    def list_history(
        user_id: UUID | str,
        response_type: AIResponseType | None = None,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """The user's stored AI responses, newest first."""
        filters: dict[str, Any] = {"user_id": str(user_id)}
        if response_type:
            filters["type"] = response_type.value

        return SupabaseClient.select_rows(
            AI_RESPONSES_TABLE,
            filters=filters,
            order_by="created_at",
            desc=True,
            limit=limit,
        )

    # -------------------------------------------------------------------------
    # Features
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_flashcards(
        user_id: UUID | str,
        text: str | None,
        collection_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Generate a flashcard set from study text.

        With a collection_id the set is saved into that collection; without
        one the set is returned unsaved (id is None) for the client to review.

        Raises:
            BadRequestError: If text is empty
            NotFoundError: If collection_id isn't the user's
            VendorError: If generation fails
        """
        if not text or not text.strip():
            raise BadRequestError("Please provide text")

        if collection_id:
            CollectionService.get_owned(collection_id, user_id)

        material = _clip_input(text.strip())
        system_prompt = FLASHCARD_SYSTEM_PROMPT.format(max_cards=settings.AI_MAX_FLASHCARDS)
        raw = AIService._complete(system_prompt, material, json_mode=True, max_tokens=3000)
        generated = parse_generated_flashcards(raw, settings.AI_MAX_FLASHCARDS)

        logger.info(f"Generated {len(generated.cards)} flashcards for user: {user_id}")

        if collection_id:
            flashcard_set = FlashcardService.create_set(
                user_id,
                FlashcardSetCreateRequest(
                    title=generated.title,
                    description=AI_GENERATED_DESCRIPTION,
                    collection_id=collection_id,
                    cards=[
                        FlashcardInput(question=c.question, answer=c.answer, difficulty=c.difficulty)
                        for c in generated.cards
                    ],
                ),
                activity_type=ActivityType.AI_GENERATE,
            )
        else:
            flashcard_set = {
                "id": None,
                "collection_id": None,
                "title": generated.title,
                "description": AI_GENERATED_DESCRIPTION,
                "cards": [card.model_dump() for card in generated.cards],
            }
            ActivityService.record(
                user_id,
                ActivityType.AI_GENERATE,
                ItemType.FLASHCARD_SET,
                item_id=None,
                item_title=generated.title,
            )

        AIService._store_response(
            user_id,
            AIResponseType.FLASHCARD,
            prompt=material,
            response=generated.model_dump_json(),
            collection_id=collection_id,
            saved=bool(collection_id),
        )

        return flashcard_set

    @staticmethod
    def summarize(user_id: UUID | str, text: str | None) -> str:
        """
        Summarize study text.

        Raises:
            BadRequestError: If text is empty
            VendorError: If generation fails
        """
        if not text or not text.strip():
            raise BadRequestError("Please provide text")

        material = _clip_input(text.strip())
        summary = AIService._complete(SUMMARY_SYSTEM_PROMPT, material, max_tokens=800)

        AIService._store_response(user_id, AIResponseType.SUMMARY, prompt=material, response=summary)
        ActivityService.record(
            user_id,
            ActivityType.AI_GENERATE,
            ItemType.SUMMARY,
            item_id=None,
            item_title=material[:80],
        )

        return summary

    @staticmethod
    def tutor(
        user_id: UUID | str,
        question: str | None,
        context: str | None = None,
    ) -> str:
        """
        Answer a study question, optionally grounded in provided material.

        Raises:
            BadRequestError: If question is empty
            VendorError: If generation fails
        """
        if not question or not question.strip():
            raise BadRequestError("Please provide a question")

        question = _clip_input(question.strip())
        if context and context.strip():
            user_content = f"<material>\n{_clip_input(context.strip())}\n</material>\n\nQuestion: {question}"
        else:
            user_content = question

        answer = AIService._complete(TUTOR_SYSTEM_PROMPT, user_content, max_tokens=800)

        AIService._store_response(user_id, AIResponseType.TUTOR, prompt=user_content, response=answer)
        ActivityService.record(
            user_id,
            ActivityType.AI_GENERATE,
            ItemType.TUTOR,
            item_id=None,
            item_title=question[:80],
        )

        return answer

    @staticmethod
    def text_to_speech(user_id: UUID | str, text: str | None) -> str:
        """
        Read arbitrary text aloud and return the hosted mp3 URL.

        Raises:
            BadRequestError: If text is empty
            VendorError: If synthesis fails
        """
        if not text or not text.strip():
            raise BadRequestError("Please provide text")

        clipped = SpeechService.clip_text(text.strip())
        audio_url = SpeechService.synthesize_to_storage(clipped, f"tts_{user_id}_{epoch_ms()}.mp3")

        ActivityService.record(
            user_id,
            ActivityType.AI_GENERATE,
            ItemType.AUDIO,
            item_id=None,
            item_title=clipped[:80],
        )

        return audio_url
