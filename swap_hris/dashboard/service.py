"""Dashboard service — fan-out data fetch, then pure aggregation.

Employees, leave requests, recruitment candidates and tasks are fetched
concurrently, each relational fetch on its own session. A failed source is
logged and treated as empty; the dashboard still loads. Every load yields a
brand-new ``DashboardSnapshot``; nothing is mutated in place.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from swap_hris.common.constants import ACTIVE_CANDIDATE_STATUS, AlertPage
from swap_hris.common.dates import business_now, to_business_time
from swap_hris.common.exceptions import AlertDataMissing, NotFoundException
from swap_hris.core_hr.models import Employee
from swap_hris.core_hr.schemas import EmployeeRecord
from swap_hris.dashboard.alerts import generate_critical_alerts
from swap_hris.dashboard.events import collect_employee_events
from swap_hris.dashboard.schemas import AlertLink, DashboardSnapshot, DashboardStats
from swap_hris.dashboard.stats import (
    calculate_department_breakdown,
    calculate_employee_stats,
    calculate_leave_stats,
    calculate_monthly_headcount,
    calculate_recruitment_stats,
    calculate_turnover,
)
from swap_hris.leave.client import LeaveSheetClient
from swap_hris.recruitment.models import RecruitmentCandidate
from swap_hris.recruitment.schemas import CandidateRecord
from swap_hris.tasks.schemas import TaskOut
from swap_hris.tasks.service import TaskService

logger = logging.getLogger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


class DashboardService:
    """Async dashboard loading and alert action lookup."""

    # ═════════════════════════════════════════════════════════════════
    # Fetchers
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def fetch_employees(session_factory: SessionFactory) -> list[EmployeeRecord]:
        """All employees, inactive and resigned included."""
        async with session_factory() as db:
            stmt = select(Employee).options(selectinload(Employee.department))
            result = await db.execute(stmt)
            return [EmployeeRecord.from_model(emp) for emp in result.scalars().all()]

    @staticmethod
    async def fetch_recruitment(session_factory: SessionFactory) -> list[CandidateRecord]:
        """Active candidates, most recent applications first."""
        async with session_factory() as db:
            stmt = (
                select(RecruitmentCandidate)
                .where(RecruitmentCandidate.status == ACTIVE_CANDIDATE_STATUS)
                .order_by(RecruitmentCandidate.apply_date.desc())
            )
            result = await db.execute(stmt)
            return [CandidateRecord.model_validate(c) for c in result.scalars().all()]

    @staticmethod
    async def fetch_tasks(session_factory: SessionFactory) -> list[TaskOut]:
        async with session_factory() as db:
            tasks = await TaskService.list_tasks(db)
            return [TaskOut.model_validate(t) for t in tasks]

    # ═════════════════════════════════════════════════════════════════
    # Load
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def load_dashboard(
        session_factory: SessionFactory,
        leave_client: LeaveSheetClient,
        now: Optional[datetime] = None,
    ) -> DashboardSnapshot:
        """Fetch every source concurrently and compute a fresh snapshot."""
        now = to_business_time(now) if now is not None else business_now()

        sources: dict[str, Awaitable[list[Any]]] = {
            "employees": DashboardService.fetch_employees(session_factory),
            "leave": leave_client.fetch_leave_requests(),
            "recruitment": DashboardService.fetch_recruitment(session_factory),
            "tasks": DashboardService.fetch_tasks(session_factory),
        }
        results = await asyncio.gather(*sources.values(), return_exceptions=True)

        data: dict[str, list[Any]] = {}
        unavailable: list[str] = []
        for name, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.error("Fetching %s failed; showing it as empty", name, exc_info=result)
                unavailable.append(name)
                data[name] = []
            else:
                data[name] = result

        employees = data["employees"]
        leave_requests = data["leave"]

        snapshot = DashboardSnapshot(
            generated_at=now,
            stats=DashboardStats(
                employees=calculate_employee_stats(employees),
                leave=calculate_leave_stats(leave_requests),
                recruitment=calculate_recruitment_stats(data["recruitment"]),
                departments=calculate_department_breakdown(employees),
            ),
            headcount_trend=calculate_monthly_headcount(employees, now),
            turnover=calculate_turnover(employees),
            alerts=generate_critical_alerts(employees, leave_requests, now),
            events=collect_employee_events(employees, now),
            tasks=data["tasks"],
            unavailable_sources=unavailable,
        )
        logger.info(
            "Dashboard loaded: %d employees, %d leave records, %d alerts",
            len(employees), len(leave_requests), len(snapshot.alerts),
        )
        return snapshot

    # ═════════════════════════════════════════════════════════════════
    # Alert actions
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    def resolve_alert_action(snapshot: DashboardSnapshot, index: int) -> AlertLink:
        """Navigation target for the alert at *index* in *snapshot*."""
        if not 0 <= index < len(snapshot.alerts):
            raise NotFoundException("Alert", index)

        alert = snapshot.alerts[index]
        if alert.link.page is AlertPage.leave:
            if alert.leave is None:
                raise AlertDataMissing("leave")
        elif alert.employee is None or alert.employee.id is None:
            raise AlertDataMissing("employee")
        return alert.link


class DashboardStore:
    """Holds the current snapshot; a refresh swaps in a whole new one."""

    def __init__(self) -> None:
        self._snapshot: Optional[DashboardSnapshot] = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> Optional[DashboardSnapshot]:
        return self._snapshot

    async def refresh(
        self,
        session_factory: SessionFactory,
        leave_client: LeaveSheetClient,
        now: Optional[datetime] = None,
    ) -> DashboardSnapshot:
        snapshot = await DashboardService.load_dashboard(session_factory, leave_client, now)
        self._snapshot = snapshot
        return snapshot

    async def current(
        self,
        session_factory: SessionFactory,
        leave_client: LeaveSheetClient,
    ) -> DashboardSnapshot:
        """The held snapshot, loading one on first use."""
        if self._snapshot is not None:
            return self._snapshot
        async with self._lock:
            if self._snapshot is None:
                await self.refresh(session_factory, leave_client)
            return self._snapshot
