"""LLM-powered structured extraction of a single task from free text."""

from __future__ import annotations

import json
from typing import Any

from anthropic import Anthropic
from openai import OpenAI

from taskflow.errors import RemoteExtractionError
from taskflow.extraction.models import DEFAULT_PRIORITY, MAX_TAGS, ExtractedTask, Priority
from taskflow.extraction.rules import FALLBACK_TITLE_LENGTH, truncate_title
from taskflow.pipeline_config import ExtractionConfig, LLMProvider

SYSTEM_PROMPT = (
    "You are a task parser that converts natural language into structured task data.\n"
    "Extract a title, description, priority level (p0=critical, p1=high, p2=medium, "
    "p3=low), and up to 4 relevant tags. If you detect a campaign/project context, "
    "include that. If a deadline is mentioned, include it as YYYY-MM-DD."
)

JSON_FORMAT_INSTRUCTIONS = (
    "Respond with valid JSON only in this format:\n"
    "{\n"
    '  "title": "Short, clear task title",\n'
    '  "description": "Detailed task description",\n'
    '  "priority": "p0|p1|p2|p3",\n'
    '  "tags": ["tag1", "tag2"],\n'
    '  "campaign": "Campaign name if detected (optional)",\n'
    '  "due_date": "YYYY-MM-DD if detected (optional)"\n'
    "}"
)

# Tool definition for Claude structured output
TASK_TOOL: dict[str, Any] = {
    "name": "store_task",
    "description": "Store the single task extracted from the user's text.",
    "input_schema": {
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Short, clear task title."},
            "description": {"type": "string", "description": "Detailed task description."},
            "priority": {
                "type": "string",
                "enum": [p.value for p in Priority],
                "description": "p0=critical, p1=high, p2=medium, p3=low.",
            },
            "tags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Up to 4 relevant tags.",
            },
            "campaign": {
                "type": "string",
                "description": "Campaign or project name, if one is mentioned.",
            },
            "due_date": {
                "type": "string",
                "description": "Deadline as YYYY-MM-DD, if one is mentioned.",
            },
        },
        "required": ["title", "description", "priority", "tags"],
    },
}


def _clean_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def coerce_task(data: Any, text: str, provider: LLMProvider) -> ExtractedTask:
    """Validate an LLM payload into an ExtractedTask.

    Defaults match the rule-based path: unknown priorities fall back to p2,
    tags are capped at four and long titles are truncated, so either path
    yields a conforming task.

    Args:
        data: The decoded JSON object returned by the model.
        text: The original user text, used for missing fields.

    Raises:
        RemoteExtractionError: If ``data`` is not a JSON object.
    """
    if not isinstance(data, dict):
        raise RemoteExtractionError(provider, f"expected a JSON object, got {type(data).__name__}")

    title = _clean_str(data.get("title")) or text[:FALLBACK_TITLE_LENGTH]
    description = _clean_str(data.get("description")) or text.strip()

    try:
        priority = Priority(data.get("priority"))
    except ValueError:
        priority = DEFAULT_PRIORITY

    raw_tags = data.get("tags")
    tags: list[str] = []
    if isinstance(raw_tags, list):
        tags = [t.strip() for t in raw_tags if isinstance(t, str) and t.strip()]

    return ExtractedTask(
        title=truncate_title(title),
        description=description,
        priority=priority,
        tags=tuple(tags[:MAX_TAGS]),
        campaign=_clean_str(data.get("campaign")),
        due_date=_clean_str(data.get("due_date")),
    )


def _extract_with_openai(text: str, config: ExtractionConfig) -> ExtractedTask:
    client = OpenAI(api_key=config.api_key)
    response = client.chat.completions.create(
        model=config.model,
        messages=[
            {"role": "system", "content": f"{SYSTEM_PROMPT}\n{JSON_FORMAT_INSTRUCTIONS}"},
            {"role": "user", "content": text},
        ],
        temperature=0.2,
        max_tokens=500,
        response_format={"type": "json_object"},
    )

    if not response.choices:
        raise RemoteExtractionError(LLMProvider.OPENAI, "no choices in response")
    content = response.choices[0].message.content
    if not content:
        raise RemoteExtractionError(LLMProvider.OPENAI, "empty message content")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise RemoteExtractionError(LLMProvider.OPENAI, f"invalid JSON: {exc}") from exc
    return coerce_task(data, text, LLMProvider.OPENAI)


def _extract_with_anthropic(text: str, config: ExtractionConfig) -> ExtractedTask:
    client = Anthropic(api_key=config.api_key)
    response = client.messages.create(
        model=config.model,
        max_tokens=500,
        temperature=0.2,
        system=SYSTEM_PROMPT,
        tools=[TASK_TOOL],
        tool_choice={"type": "tool", "name": "store_task"},
        messages=[{"role": "user", "content": text}],
    )
    return _parse_tool_response(response, text)


def _parse_tool_response(response: Any, text: str) -> ExtractedTask:
    """Parse the Claude tool_use response into an ExtractedTask."""
    for block in response.content:
        if block.type != "tool_use":
            continue
        if block.name != "store_task":
            continue

        data = block.input
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise RemoteExtractionError(LLMProvider.ANTHROPIC, f"invalid JSON: {exc}") from exc
        return coerce_task(data, text, LLMProvider.ANTHROPIC)

    raise RemoteExtractionError(LLMProvider.ANTHROPIC, "no store_task tool call in response")


def extract_remote(text: str, config: ExtractionConfig) -> ExtractedTask:
    """Extract a task from ``text`` using the configured LLM provider.

    Raises:
        RemoteExtractionError: If no credential is configured or the reply is unusable.
        openai.OpenAIError | anthropic.AnthropicError: On transport or API failures.
    """
    if not config.has_credential:
        raise RemoteExtractionError(config.provider, "no API key configured")

    if config.provider is LLMProvider.ANTHROPIC:
        return _extract_with_anthropic(text, config)
    return _extract_with_openai(text, config)
