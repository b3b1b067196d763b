"""Task endpoints: create, list, detail, update and delete stored tasks."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response

from taskflow.api.models import (
    TaskCreateRequest,
    TaskCreateResponse,
    TaskDetail,
    TaskStatus,
    TaskUpdateRequest,
)
from taskflow.extraction.models import Priority
from taskflow.storage import (
    delete_task,
    find_campaign_id,
    get_supabase_client,
    get_task,
    list_tasks,
    store_task,
    update_task,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/tasks", response_model=TaskCreateResponse, status_code=201)
async def create_task(body: TaskCreateRequest) -> TaskCreateResponse:
    """Store an extracted (and possibly user-edited) task with status ``todo``."""
    task = body.to_task()
    try:
        client = get_supabase_client()
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"Task storage unavailable: {exc}") from exc

    campaign_id: str | None = None
    if task.campaign:
        try:
            campaign_id = find_campaign_id(client, task.campaign)
        except Exception:
            # An unresolved campaign should not block task creation.
            logger.warning("Campaign lookup failed for %r", task.campaign, exc_info=True)

    try:
        task_id = store_task(client, task, campaign_id=campaign_id)
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"Could not store task: {exc}") from exc

    return TaskCreateResponse(id=task_id, campaign_id=campaign_id)


@router.get("/api/tasks", response_model=list[TaskDetail])
async def get_tasks(
    status: TaskStatus | None = None,
    priority: Priority | None = None,
) -> list[TaskDetail]:
    """List tasks newest first, optionally filtered by status and priority."""
    client = get_supabase_client()
    rows = list_tasks(
        client,
        status=status.value if status else None,
        priority=priority.value if priority else None,
    )
    return [TaskDetail.from_row(r) for r in rows]


@router.get("/api/tasks/{task_id}", response_model=TaskDetail)
async def get_task_detail(task_id: str) -> TaskDetail:
    client = get_supabase_client()
    row = get_task(client, task_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskDetail.from_row(row)


@router.patch("/api/tasks/{task_id}", response_model=TaskDetail)
async def edit_task(task_id: str, body: TaskUpdateRequest) -> TaskDetail:
    """Update the fields sent in the body, e.g. to move a task to ``in_progress`` or ``done``."""
    fields = body.to_fields()
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    client = get_supabase_client()
    row = update_task(client, task_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskDetail.from_row(row)


@router.delete("/api/tasks/{task_id}", status_code=204)
async def remove_task(task_id: str) -> Response:
    """Delete a task; 404 when it does not exist."""
    client = get_supabase_client()
    if not delete_task(client, task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return Response(status_code=204)
