"""Tasks router — the dashboard's manual to-do list."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from swap_hris.common.constants import TaskPriority, TaskStatus
from swap_hris.database import get_db
from swap_hris.tasks.schemas import TaskCreate, TaskListResponse, TaskOut, TaskUpdate
from swap_hris.tasks.service import TaskService

router = APIRouter()


# ── GET / ────────────────────────────────────────────────────────────

@router.get("/", response_model=TaskListResponse)
async def list_tasks(
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List tasks, newest first."""
    tasks = await TaskService.list_tasks(db, status=status, priority=priority)
    return TaskListResponse(
        data=[TaskOut.model_validate(t) for t in tasks],
        total=len(tasks),
    )


# ── POST / ───────────────────────────────────────────────────────────

@router.post("/", response_model=TaskOut, status_code=201)
async def create_task(
    body: TaskCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new task."""
    task = await TaskService.create_task(
        db,
        title=body.title,
        description=body.description,
        priority=body.priority,
        due_date=body.due_date,
        created_by=body.created_by,
    )
    return TaskOut.model_validate(task)


# ── PATCH /{task_id} ─────────────────────────────────────────────────

@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: uuid.UUID,
    body: TaskUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update task fields."""
    task = await TaskService.update_task(db, task_id, **body.model_dump(exclude_unset=True))
    return TaskOut.model_validate(task)


# ── POST /{task_id}/toggle ───────────────────────────────────────────

@router.post("/{task_id}/toggle", response_model=TaskOut)
async def toggle_task(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Mark a pending task completed, or a completed one pending again."""
    task = await TaskService.toggle_task(db, task_id)
    return TaskOut.model_validate(task)


# ── DELETE /{task_id} ────────────────────────────────────────────────

@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a task."""
    await TaskService.delete_task(db, task_id)
    return Response(status_code=204)
