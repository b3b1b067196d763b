from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from taskflow.pipeline_config import LLMProvider


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    openai_api_key: str = ""
    anthropic_api_key: str = ""  # Only needed when llm_provider is "anthropic"

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # LLM
    llm_provider: LLMProvider = LLMProvider.OPENAI
    openai_model: str = "gpt-3.5-turbo"
    anthropic_model: str = "claude-sonnet-4-20250514"
    transcription_model: str = "whisper-1"
    transcription_language: str = "en"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
