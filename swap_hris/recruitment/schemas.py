"""Recruitment Pydantic v2 schemas."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


class CandidateRecord(BaseModel):
    """Read-only candidate snapshot used by the pipeline widget."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    candidate_name: str = ""
    position: Optional[str] = None
    current_stage: Optional[str] = None
    status: Optional[str] = None
    apply_date: Optional[date] = None
