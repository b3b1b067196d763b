"""Text-to-task entry point: remote LLM first, rule-based extraction as fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from taskflow.config import Settings
from taskflow.extraction.models import ExtractedTask
from taskflow.extraction.remote import extract_remote
from taskflow.extraction.rules import extract
from taskflow.pipeline_config import ExtractionConfig, ExtractionSource, LLMProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteResult:
    """Outcome of the remote stage: exactly one of ``task`` or ``error`` is set."""

    task: ExtractedTask | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.task is not None


@dataclass(frozen=True)
class ExtractionOutcome:
    """The task handed to callers, plus which path produced it."""

    task: ExtractedTask
    source: ExtractionSource
    remote_error: Exception | None = None


def extraction_config_from_settings(settings: Settings) -> ExtractionConfig:
    """Build the per-call extraction config for the configured provider."""
    if settings.llm_provider is LLMProvider.ANTHROPIC:
        return ExtractionConfig(
            provider=LLMProvider.ANTHROPIC,
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
        )
    return ExtractionConfig(
        provider=LLMProvider.OPENAI,
        api_key=settings.openai_api_key,
        model=settings.openai_model,
    )


def try_remote(text: str, config: ExtractionConfig) -> RemoteResult:
    """Run the LLM stage, capturing any failure instead of raising it."""
    try:
        return RemoteResult(task=extract_remote(text, config))
    except Exception as exc:
        logger.warning("Remote extraction via %s failed: %s", config.provider, exc)
        return RemoteResult(error=exc)


def text_to_task(text: str, config: ExtractionConfig) -> ExtractionOutcome:
    """Turn free text into a structured task.

    Uses the LLM when a credential is configured; otherwise, or when the LLM
    stage fails, falls back to the rule-based extractor. Both paths return the
    same ExtractedTask shape.

    Args:
        text: Non-blank natural-language task description.
        config: Provider, credential and model for the remote stage.

    Returns:
        An ExtractionOutcome with the task and its source.
    """
    if not config.has_credential:
        logger.warning("No %s API key configured, using rule-based extraction", config.provider)
        return ExtractionOutcome(task=extract(text), source=ExtractionSource.RULES)

    result = try_remote(text, config)
    if result.task is not None:
        return ExtractionOutcome(task=result.task, source=ExtractionSource.REMOTE)

    return ExtractionOutcome(
        task=extract(text),
        source=ExtractionSource.RULES,
        remote_error=result.error,
    )
