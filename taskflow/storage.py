"""Supabase storage helpers for tasks and campaigns."""

from __future__ import annotations

import logging
from typing import Any, cast

from supabase import Client, create_client

from taskflow.config import settings
from taskflow.extraction.models import ExtractedTask

logger = logging.getLogger(__name__)


def get_supabase_client() -> Client:
    """Create and return a Supabase client from the configured URL and key."""
    return create_client(settings.supabase_url, settings.supabase_key)


def find_campaign_id(client: Client, campaign: str | None) -> str | None:
    """Return the id of the first campaign whose title contains ``campaign``."""
    if not campaign:
        return None

    result = (
        client.table("campaigns")
        .select("id, title")
        .ilike("title", f"%{campaign}%")
        .limit(1)
        .execute()
    )
    rows = cast(list[dict[str, Any]], result.data)
    if not rows:
        return None
    return str(rows[0]["id"])


def store_task(
    client: Client,
    task: ExtractedTask,
    campaign_id: str | None = None,
    status: str = "todo",
) -> str:
    """Insert a task row and return the generated task ID."""
    result = (
        client.table("tasks")
        .insert(
            {
                "title": task.title,
                "description": task.description,
                "status": status,
                "priority": task.priority.value,
                "tags": list(task.tags) if task.tags else None,
                "campaign_id": campaign_id,
                "due_date": task.due_date,
            }
        )
        .execute()
    )
    task_id = str(result.data[0]["id"])
    logger.info("Stored task %s (priority %s)", task_id, task.priority.value)
    return task_id


def list_tasks(
    client: Client,
    status: str | None = None,
    priority: str | None = None,
) -> list[dict[str, Any]]:
    """List tasks ordered by creation date (newest first)."""
    query = client.table("tasks").select("*")

    if status:
        query = query.eq("status", status)
    if priority:
        query = query.eq("priority", priority)

    result = query.order("created_at", desc=True).execute()
    return cast(list[dict[str, Any]], result.data)


def get_task(client: Client, task_id: str) -> dict[str, Any] | None:
    result = client.table("tasks").select("*").eq("id", task_id).execute()
    rows = cast(list[dict[str, Any]], result.data)
    return rows[0] if rows else None


def update_task(client: Client, task_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Apply ``fields`` to a task; returns the updated row, or None when no row matched."""
    result = client.table("tasks").update(fields).eq("id", task_id).execute()
    rows = cast(list[dict[str, Any]], result.data)
    if not rows:
        return None
    logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(fields)))
    return rows[0]


def delete_task(client: Client, task_id: str) -> bool:
    """Delete a task; returns False when no row matched ``task_id``."""
    result = client.table("tasks").delete().eq("id", task_id).execute()
    return bool(result.data)
