"""Dashboard task ORM model — the hosted store's ``tasks`` table.

SQLAlchemy 2.0 async-compatible model.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from swap_hris.common.constants import TaskPriority, TaskStatus
from swap_hris.database import Base


class Task(Base):
    """Manual to-do item shown next to the auto-generated alerts."""

    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    priority: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=TaskPriority.medium.value,
    )
    due_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=TaskStatus.pending.value,
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(sa.Uuid)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True),
    )

    def __repr__(self) -> str:
        return f"<Task {self.title!r} ({self.status})>"
