"""Recruitment ORM model — the hosted store's ``recruitment_tracker`` table."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from swap_hris.database import Base


class RecruitmentCandidate(Base):
    """A candidate moving through the hiring pipeline."""

    __tablename__ = "recruitment_tracker"

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4,
    )
    candidate_name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    position: Mapped[Optional[str]] = mapped_column(sa.String(150))
    current_stage: Mapped[Optional[str]] = mapped_column(sa.String(50))
    status: Mapped[str] = mapped_column(sa.String(30), server_default="Active", default="Active")
    apply_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(),
    )

    def __repr__(self) -> str:
        return f"<RecruitmentCandidate {self.candidate_name!r} @ {self.current_stage}>"
