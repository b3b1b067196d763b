"""Extraction configuration: provider/source enums and the ExtractionConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class LLMProvider(StrEnum):
    """Hosted LLM used for the remote extraction path."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class ExtractionSource(StrEnum):
    """Which path produced an extracted task."""

    REMOTE = "remote"
    RULES = "rules"


@dataclass(frozen=True)
class ExtractionConfig:
    """Immutable per-call configuration for the text-to-task pipeline.

    Built from Settings at the API layer and passed down explicitly, so
    nothing below the routes reads global configuration.
    """

    provider: LLMProvider = LLMProvider.OPENAI
    api_key: str = ""
    model: str = "gpt-3.5-turbo"

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key.strip())
