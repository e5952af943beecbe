"""Core HR Pydantic v2 schemas — employee records consumed by the dashboard.

Date fields accept ``date`` or raw ``str``: rows from the hosted store can
carry malformed values, and the dashboard skips those per record instead of
rejecting the whole batch.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from swap_hris.common.constants import UNKNOWN_DEPARTMENT
from swap_hris.core_hr.models import Employee

DateLike = Optional[Union[date, str]]


class EmployeeRecord(BaseModel):
    """Read-only employee snapshot."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    full_name: str = ""
    employee_code: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    birth_date: DateLike = None
    join_date: DateLike = None
    employment_status: Optional[str] = None
    current_contract_end: DateLike = None
    resign_date: DateLike = None
    is_active: bool = False
    is_resigned: bool = False
    department_name: Optional[str] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def _name_or_empty(cls, v):
        return v or ""

    @field_validator("is_active", "is_resigned", mode="before")
    @classmethod
    def _flag_or_false(cls, v):
        return bool(v)

    @property
    def department_label(self) -> str:
        return self.department_name or UNKNOWN_DEPARTMENT

    @classmethod
    def from_model(cls, employee: Employee) -> EmployeeRecord:
        record = cls.model_validate(employee)
        if employee.department is not None:
            record.department_name = employee.department.name
        return record


class EmployeeBrief(BaseModel):
    """Minimal employee info embedded in alert and event payloads."""

    id: Optional[uuid.UUID] = None
    full_name: str = ""
    department_name: Optional[str] = None

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> EmployeeBrief:
        return cls(
            id=record.id,
            full_name=record.full_name,
            department_name=record.department_name,
        )
