# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    AUDIO_BUCKET: str = Field(
        default="audio",
        description="Storage bucket that holds generated speech files"
    )

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        ...,
        min_length=16,
        description="Secret used to sign access and password-reset tokens"
    )

    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm for issued tokens"
    )

    JWT_EXPIRATION_DAYS: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Lifetime of an access token in days"
    )

    PASSWORD_RESET_EXPIRATION_MINUTES: int = Field(
        default=60,
        ge=5,
        le=1440,
        description="Lifetime of a password reset token in minutes"
    )

    BCRYPT_ROUNDS: int = Field(
        default=10,
        ge=4,
        le=16,
        description="bcrypt cost factor for password hashes"
    )

    # -------------------------------------------------------------------------
    # OpenAI / LLM Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        ...,
        description="OpenAI API key for flashcards, summaries and tutoring"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat model (must support JSON mode)"
    )

    OPENAI_TEMPERATURE: float = Field(
        default=0.4,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for AI study features"
    )

    AI_MAX_INPUT_CHARS: int = Field(
        default=15000,
        ge=100,
        description="Longest study text sent to the model"
    )

    AI_MAX_FLASHCARDS: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Maximum number of generated flashcards kept per request"
    )

    # -------------------------------------------------------------------------
    # ElevenLabs / Text-to-Speech
    # -------------------------------------------------------------------------

    ELEVENLABS_API_KEY: str = Field(
        default="",
        description="ElevenLabs API key (audio generation fails without it)"
    )

    ELEVENLABS_BASE_URL: str = Field(
        default="https://api.elevenlabs.io/v1",
        description="ElevenLabs REST base URL"
    )

    ELEVENLABS_VOICE_ID: str = Field(
        default="21m00Tcm4TlvDq8ikWAM",
        description="Voice used for generated audio"
    )

    ELEVENLABS_MODEL_ID: str = Field(
        default="eleven_monolingual_v1",
        description="ElevenLabs synthesis model"
    )

    TTS_MAX_CHARS: int = Field(
        default=5000,
        ge=1,
        description="Text longer than this is truncated before synthesis"
    )

    TTS_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="HTTP timeout for a synthesis request"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    SITE_URL: str | None = Field(
        default=None,
        description="Public URL of the web client; allowed for CORS and used in reset links"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    RATE_LIMIT_REQUESTS: int = Field(
        default=100,
        ge=1,
        description="Requests allowed per client per window"
    )

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=15 * 60,
        ge=1,
        description="Length of the rate limit window"
    )

    TRUST_PROXY: bool = Field(
        default=False,
        description="Key rate limits on X-Forwarded-For; enable only behind a reverse proxy that sets it"
    )

    REDIS_URL: str | None = Field(
        default=None,
        description="Redis URL for shared rate limit counters (in-process when unset)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS into a list and append SITE_URL when configured.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        if self.SITE_URL and self.SITE_URL not in origins:
            origins.append(self.SITE_URL)
        return origins

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(days=self.JWT_EXPIRATION_DAYS)

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.PASSWORD_RESET_EXPIRATION_MINUTES)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
