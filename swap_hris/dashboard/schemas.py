"""Dashboard Pydantic v2 schemas — alerts, statistics and the snapshot."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field, computed_field

from swap_hris.common.constants import AlertPage, AlertPriority, AlertType
from swap_hris.core_hr.schemas import EmployeeBrief
from swap_hris.leave.schemas import LeaveRecord
from swap_hris.tasks.schemas import TaskOut


# ═════════════════════════════════════════════════════════════════════
# Alerts
# ═════════════════════════════════════════════════════════════════════


class AlertLink(BaseModel):
    """Where an alert's suggested action leads, and with which parameters."""

    page: AlertPage
    params: dict[str, str] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def href(self) -> str:
        query = urlencode(self.params)
        return f"{self.page.value}.html?{query}" if query else f"{self.page.value}.html"


class Alert(BaseModel):
    """A critical alert; regenerated on every load, never stored."""

    type: AlertType
    priority: AlertPriority
    title: str
    description: str
    action: str = Field(..., description="Suggested follow-up action label")
    link: AlertLink
    employee: Optional[EmployeeBrief] = None
    leave: Optional[LeaveRecord] = None
    days_remaining: Optional[int] = None
    days_pending: Optional[int] = None
    years: Optional[int] = None


class AlertsResponse(BaseModel):
    generated_at: datetime
    total: int
    data: list[Alert]


# ═════════════════════════════════════════════════════════════════════
# Statistics
# ═════════════════════════════════════════════════════════════════════


class EmployeeStats(BaseModel):
    total_employees: int = 0
    total_male: int = 0
    total_female: int = 0
    active_employees: int = 0
    active_male: int = 0
    active_female: int = 0
    inactive_employees: int = 0
    inactive_male: int = 0
    inactive_female: int = 0


class LeaveStats(BaseModel):
    pending_leaves: int = 0
    approved_leaves: int = 0
    declined_leaves: int = 0


class RecruitmentStats(BaseModel):
    screening: int = 0
    interview: int = Field(0, description="HR Interview and User Interview combined")
    offering: int = 0


class DepartmentBreakdownItem(BaseModel):
    """Active, non-resigned headcount for one department."""

    department_name: str
    count: int = 0
    male: int = 0
    female: int = 0
    percentage: float = Field(0.0, description="Share of the breakdown total, one decimal")


class HeadcountTrend(BaseModel):
    """Month-end headcount over the trailing months, oldest first."""

    labels: list[str] = Field(default_factory=list)
    month_ends: list[date] = Field(default_factory=list)
    active: list[int] = Field(default_factory=list)
    total: list[int] = Field(default_factory=list)


class TurnoverSnapshot(BaseModel):
    active: int = 0
    resigned: int = 0
    inactive: int = 0
    total: int = 0
    turnover_rate: str = Field("0.0", description="Resigned / total as a percentage, one decimal")


class DashboardStats(BaseModel):
    employees: EmployeeStats
    leave: LeaveStats
    recruitment: RecruitmentStats
    departments: list[DepartmentBreakdownItem]


# ═════════════════════════════════════════════════════════════════════
# Employee events (side widgets)
# ═════════════════════════════════════════════════════════════════════


class BirthdayItem(BaseModel):
    employee: EmployeeBrief
    birthday_date: date
    is_today: bool = False


class AnniversaryItem(BaseModel):
    employee: EmployeeBrief
    anniversary_date: date
    years_of_service: int
    is_today: bool = False


class ContractExpiryItem(BaseModel):
    employee: EmployeeBrief
    contract_end: date
    days_until_expiry: int
    urgency: AlertPriority


class EmployeeEvents(BaseModel):
    birthdays_this_month: list[BirthdayItem] = Field(default_factory=list)
    upcoming_anniversaries: list[AnniversaryItem] = Field(default_factory=list)
    contracts_expiring: list[ContractExpiryItem] = Field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════
# Snapshot
# ═════════════════════════════════════════════════════════════════════


class DashboardSnapshot(BaseModel):
    """Everything the dashboard shows, computed from one consistent load."""

    generated_at: datetime
    stats: DashboardStats
    headcount_trend: HeadcountTrend
    turnover: TurnoverSnapshot
    alerts: list[Alert]
    events: EmployeeEvents
    tasks: list[TaskOut]
    unavailable_sources: list[str] = Field(
        default_factory=list,
        description="Sources whose fetch failed and were treated as empty",
    )
