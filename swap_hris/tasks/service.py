"""Task service layer — CRUD for the dashboard's manual to-do list."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from swap_hris.common.constants import TaskPriority, TaskStatus
from swap_hris.common.exceptions import NotFoundException
from swap_hris.tasks.models import Task

logger = logging.getLogger(__name__)


class TaskService:
    """Business logic for dashboard tasks."""

    @staticmethod
    async def list_tasks(
        db: AsyncSession,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> list[Task]:
        """List tasks newest first, optionally filtered."""
        stmt = select(Task)
        if status:
            stmt = stmt.where(Task.status == status.value)
        if priority:
            stmt = stmt.where(Task.priority == priority.value)
        stmt = stmt.order_by(Task.created_at.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_task(db: AsyncSession, task_id: uuid.UUID) -> Task:
        task = await db.get(Task, task_id)
        if task is None:
            raise NotFoundException("Task", task_id)
        return task

    @staticmethod
    async def create_task(
        db: AsyncSession,
        title: str,
        description: Optional[str] = None,
        priority: TaskPriority = TaskPriority.medium,
        due_date: Optional[date] = None,
        created_by: Optional[uuid.UUID] = None,
    ) -> Task:
        """Create a new task; tasks always start pending."""
        task = Task(
            title=title,
            description=description,
            priority=priority.value,
            due_date=due_date,
            status=TaskStatus.pending.value,
            created_by=created_by,
            created_at=datetime.now(timezone.utc),
        )
        db.add(task)
        await db.flush()
        logger.info("Task created: %s", task.id)
        return task

    @staticmethod
    async def update_task(
        db: AsyncSession,
        task_id: uuid.UUID,
        **kwargs,
    ) -> Task:
        """Update a task's fields; ``None`` values are left untouched."""
        task = await TaskService.get_task(db, task_id)

        for field, value in kwargs.items():
            if value is not None and hasattr(task, field):
                setattr(task, field, getattr(value, "value", value))

        task.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return task

    @staticmethod
    async def toggle_task(db: AsyncSession, task_id: uuid.UUID) -> Task:
        """Flip a task between pending and completed."""
        task = await TaskService.get_task(db, task_id)
        task.status = (
            TaskStatus.pending.value
            if task.status == TaskStatus.completed.value
            else TaskStatus.completed.value
        )
        task.updated_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info("Task %s status: %s", task.id, task.status)
        return task

    @staticmethod
    async def delete_task(db: AsyncSession, task_id: uuid.UUID) -> None:
        task = await TaskService.get_task(db, task_id)
        await db.delete(task)
        await db.flush()
