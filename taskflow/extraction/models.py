"""Data models for structured task extraction results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    """Task priority levels, p0 (critical) through p3 (low)."""

    CRITICAL = "p0"
    HIGH = "p1"
    MEDIUM = "p2"
    LOW = "p3"


DEFAULT_PRIORITY = Priority.MEDIUM
MAX_TAGS = 4


@dataclass(frozen=True)
class ExtractedTask:
    """A task parsed out of free text, by either the rule path or an LLM."""

    title: str
    description: str
    priority: Priority = DEFAULT_PRIORITY
    tags: tuple[str, ...] = field(default_factory=tuple)
    campaign: str | None = None
    due_date: str | None = None  # free-form, only ever set by the remote path

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "tags": list(self.tags),
            "campaign": self.campaign,
            "due_date": self.due_date,
        }
