"""Pydantic request/response schemas for the taskflow API."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from taskflow.extraction.models import MAX_TAGS, ExtractedTask, Priority
from taskflow.pipeline_config import ExtractionSource


class TaskStatus(StrEnum):
    """Workflow states of a stored task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"


def _clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("title must not be blank")
    return value


def _clean_tags(value: list[str]) -> list[str]:
    return [t.strip() for t in value if t.strip()]


class TextToTaskRequest(BaseModel):
    """Request body for the /api/text-to-task endpoint."""

    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value


class ExtractedTaskResponse(BaseModel):
    """A structured task produced by either extraction path."""

    title: str
    description: str
    priority: Priority
    tags: list[str] = []
    campaign: str | None = None
    due_date: str | None = None
    source: ExtractionSource

    @classmethod
    def from_task(cls, task: ExtractedTask, source: ExtractionSource) -> ExtractedTaskResponse:
        return cls(**task.to_dict(), source=source)


class VoiceToTaskResponse(ExtractedTaskResponse):
    """Response body for the /api/voice-to-task endpoint."""

    transcript: str


class TaskCreateRequest(BaseModel):
    """Request body for /api/tasks: an extracted task, possibly edited by the user."""

    title: str = Field(min_length=1, max_length=80)
    description: str = ""
    priority: Priority = Priority.MEDIUM
    tags: list[str] = Field(default=[], max_length=MAX_TAGS)
    campaign: str | None = None
    due_date: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)

    def to_task(self) -> ExtractedTask:
        return ExtractedTask(
            title=self.title,
            description=self.description.strip(),
            priority=self.priority,
            tags=tuple(self.tags),
            campaign=self.campaign or None,
            due_date=self.due_date or None,
        )


class TaskUpdateRequest(BaseModel):
    """Request body for PATCH /api/tasks/{id}; only the fields sent are changed."""

    title: str | None = Field(default=None, min_length=1, max_length=80)
    description: str | None = None
    status: TaskStatus | None = None
    priority: Priority | None = None
    tags: list[str] | None = Field(default=None, max_length=MAX_TAGS)
    campaign_id: str | None = None
    due_date: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        return _clean_title(value) if value is not None else None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value) if value is not None else None

    def to_fields(self) -> dict[str, Any]:
        """Column values for the fields present in the request body."""
        fields = self.model_dump(mode="json", exclude_unset=True)
        # NOT NULL columns; an explicit null leaves them unchanged
        for key in ("title", "status", "priority"):
            if key in fields and fields[key] is None:
                del fields[key]
        if "tags" in fields and not fields["tags"]:
            fields["tags"] = None
        for key in ("campaign_id", "due_date"):
            if key in fields and not fields[key]:
                fields[key] = None
        if "description" in fields and fields["description"] is not None:
            fields["description"] = fields["description"].strip()
        return fields


class TaskCreateResponse(BaseModel):
    """Response body for a created task."""

    id: str
    campaign_id: str | None = None


class TaskDetail(BaseModel):
    """A stored task row."""

    id: str
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    tags: list[str] | None = None
    campaign_id: str | None = None
    due_date: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> TaskDetail:
        return cls(
            id=str(row["id"]),
            title=row["title"],
            description=row.get("description"),
            status=row.get("status") or TaskStatus.TODO,
            priority=row.get("priority") or Priority.MEDIUM,
            tags=row.get("tags"),
            campaign_id=row.get("campaign_id"),
            due_date=row.get("due_date"),
            created_at=row.get("created_at"),
        )
