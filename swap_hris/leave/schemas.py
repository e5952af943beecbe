"""Leave Pydantic v2 schemas — rows from the leave tracking spreadsheet.

The sheet's columns are Indonesian; aliases map them onto English names
while ``populate_by_name`` keeps the English names usable internally.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from swap_hris.common.constants import LeaveStatus
from swap_hris.leave.status import normalize_leave_status

# Submission time columns, in order of preference
_TIMESTAMP_KEYS = ("timestamp", "tanggalPermohonan")


class LeaveRecord(BaseModel):
    """One leave request as published by the spreadsheet API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    employee_name: str = Field(
        default="",
        validation_alias=AliasChoices("namaLengkap", "employee_name"),
    )
    status: Optional[str] = None
    submitted_at: Optional[Union[datetime, date, str]] = None

    @model_validator(mode="before")
    @classmethod
    def _pick_timestamp(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("submitted_at"):
            for key in _TIMESTAMP_KEYS:
                if data.get(key):
                    return {**data, "submitted_at": data[key]}
        return data

    @field_validator("employee_name", mode="before")
    @classmethod
    def _name_or_empty(cls, v):
        return str(v) if v else ""

    @field_validator("status", "submitted_at", mode="before")
    @classmethod
    def _coerce_scalar(cls, v):
        if v is None or isinstance(v, (date, datetime)):
            return v
        return str(v)

    @property
    def normalized_status(self) -> LeaveStatus:
        return normalize_leave_status(self.status)
