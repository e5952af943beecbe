"""Core HR ORM models: Department, Employee.

SQLAlchemy 2.0 async-compatible models with Mapped[] annotations, mirroring
the hosted store's ``departments`` and ``employees`` tables. The store owns
the schema; free-text columns (gender, employment_status) are kept as plain
strings because the front-end writes them verbatim.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from swap_hris.database import Base


# ═════════════════════════════════════════════════════════════════════
# Department
# ═════════════════════════════════════════════════════════════════════


class Department(Base):
    """Organisational department."""

    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(sa.String(150), unique=True, nullable=False)
    code: Mapped[Optional[str]] = mapped_column(sa.String(20))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(),
    )

    employees: Mapped[list[Employee]] = relationship(back_populates="department")

    def __repr__(self) -> str:
        return f"<Department {self.name!r}>"


# ═════════════════════════════════════════════════════════════════════
# Employee
# ═════════════════════════════════════════════════════════════════════


class Employee(Base):
    """Employee record as stored upstream."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4,
    )
    employee_code: Mapped[Optional[str]] = mapped_column(sa.String(30), unique=True)
    full_name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(sa.String(30))

    # ── Demographics ────────────────────────────────────────────────
    gender: Mapped[Optional[str]] = mapped_column(sa.String(20))
    birth_date: Mapped[Optional[date]] = mapped_column(sa.Date)

    # ── Employment lifecycle ────────────────────────────────────────
    department_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        sa.Uuid, sa.ForeignKey("departments.id"),
    )
    join_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    employment_status: Mapped[Optional[str]] = mapped_column(sa.String(30))
    current_contract_end: Mapped[Optional[date]] = mapped_column(sa.Date)
    resign_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    is_active: Mapped[bool] = mapped_column(
        sa.Boolean, server_default=sa.true(), default=True,
    )
    is_resigned: Mapped[bool] = mapped_column(
        sa.Boolean, server_default=sa.false(), default=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(),
    )

    department: Mapped[Optional[Department]] = relationship(back_populates="employees")

    def __repr__(self) -> str:
        return f"<Employee {self.full_name!r}>"
