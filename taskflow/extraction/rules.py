"""Rule-based text-to-task extraction.

Offline fallback for when no LLM credential is configured or the LLM call
fails. Every step is an ordered, first-match-wins keyword scan so the output
is fully predictable for a given input.
"""

from __future__ import annotations

import re

from taskflow.extraction.models import DEFAULT_PRIORITY, MAX_TAGS, ExtractedTask, Priority

MAX_TITLE_LENGTH = 80
FALLBACK_TITLE_LENGTH = 50

# Lead-in phrases; the title runs to the first comma or period
_TITLE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"remind me to ([^,.]+)", re.IGNORECASE),
    re.compile(r"need to ([^,.]+)", re.IGNORECASE),
    re.compile(r"have to ([^,.]+)", re.IGNORECASE),
    re.compile(r"should ([^,.]+)", re.IGNORECASE),
]

_SENTENCE_SPLIT = re.compile(r"[.!?]")

# Checked top to bottom; plain substrings, no word boundaries
_PRIORITY_PATTERNS: list[tuple[re.Pattern[str], Priority]] = [
    (re.compile(r"urgent|asap|immediately|critical", re.IGNORECASE), Priority.CRITICAL),
    (re.compile(r"high priority|important|high|priority", re.IGNORECASE), Priority.HIGH),
    (re.compile(r"medium|normal", re.IGNORECASE), Priority.MEDIUM),
    (re.compile(r"low|whenever|if you have time|not urgent", re.IGNORECASE), Priority.LOW),
]

TAG_KEYWORDS: tuple[str, ...] = (
    "investor",
    "fundraising",
    "meeting",
    "presentation",
    "report",
    "design",
    "development",
    "marketing",
    "sales",
    "customer",
    "bug",
    "feature",
    "documentation",
    "testing",
    "research",
    "review",
    "feedback",
    "email",
    "call",
    "interview",
    "demo",
    "product",
    "team",
    "planning",
    "launch",
)

CAMPAIGN_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("fundraising", "Fundraising 2025"),
    ("investor", "Fundraising 2025"),
    ("marketing", "Q2 Marketing"),
    ("launch", "Product Launch"),
    ("release", "Product Launch"),
    ("hiring", "Team Expansion"),
    ("recruitment", "Team Expansion"),
)


def truncate_title(title: str) -> str:
    """Cap a title at 80 characters, replacing the overflow with an ellipsis."""
    if len(title) > MAX_TITLE_LENGTH:
        return title[: MAX_TITLE_LENGTH - 3] + "..."
    return title


def extract_title(text: str) -> str:
    """Pick a title from a lead-in phrase, else the first sentence, else a prefix."""
    title = ""
    for pattern in _TITLE_PATTERNS:
        match = pattern.search(text)
        if match:
            title = match.group(1).strip()
            break

    if not title:
        sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
        if sentences:
            title = sentences[0].strip()
        else:
            title = text[:FALLBACK_TITLE_LENGTH]

    return truncate_title(title)


def extract_priority(text: str) -> Priority:
    for pattern, priority in _PRIORITY_PATTERNS:
        if pattern.search(text):
            return priority
    return DEFAULT_PRIORITY


def extract_tags(text: str) -> tuple[str, ...]:
    """Return up to four known keywords found in ``text``, in keyword-list order."""
    lowered = text.lower()
    tags = [tag for tag in TAG_KEYWORDS if tag in lowered]
    return tuple(tags[:MAX_TAGS])


def extract_campaign(text: str) -> str | None:
    lowered = text.lower()
    for keyword, campaign in CAMPAIGN_KEYWORDS:
        if keyword in lowered:
            return campaign
    return None


def extract(text: str) -> ExtractedTask:
    """Convert free text into an ExtractedTask without any network call.

    Never raises. Empty input yields a degenerate task with an empty title;
    callers that need non-blank input must check before calling.

    Args:
        text: The natural-language task description.

    Returns:
        The extracted task. ``description`` is always ``text.strip()``.
    """
    return ExtractedTask(
        title=extract_title(text),
        description=text.strip(),
        priority=extract_priority(text),
        tags=extract_tags(text),
        campaign=extract_campaign(text),
    )
