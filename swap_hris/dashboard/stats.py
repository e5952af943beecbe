"""Aggregate statistics for the dashboard widgets.

Pure reductions over already-fetched lists. Missing fields fall back to
safe defaults (no gender, "Unknown" department, unreadable dates ignored).
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from swap_hris.common.constants import (
    HEADCOUNT_TREND_MONTHS,
    MONTH_LABEL_FORMAT,
    GenderType,
    LeaveStatus,
    RecruitmentStage,
)
from swap_hris.common.dates import business_now, month_end, parse_date, trailing_month_starts
from swap_hris.core_hr.schemas import EmployeeRecord
from swap_hris.dashboard.schemas import (
    DepartmentBreakdownItem,
    EmployeeStats,
    HeadcountTrend,
    LeaveStats,
    RecruitmentStats,
    TurnoverSnapshot,
)
from swap_hris.leave.schemas import LeaveRecord
from swap_hris.recruitment.schemas import CandidateRecord

_INTERVIEW_STAGES = {RecruitmentStage.hr_interview.value, RecruitmentStage.user_interview.value}
_ONE_DECIMAL = Decimal("0.1")


def _is_male(employee: EmployeeRecord) -> bool:
    return employee.gender == GenderType.male.value


def _is_female(employee: EmployeeRecord) -> bool:
    return employee.gender == GenderType.female.value


def _percentage(part: int, whole: int) -> Decimal:
    """Share of *whole* as a percentage, half-up to one decimal."""
    if whole <= 0:
        return Decimal("0.0")
    share = Decimal(part) * 100 / Decimal(whole)
    return share.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)


def calculate_employee_stats(employees: Sequence[EmployeeRecord]) -> EmployeeStats:
    """Totals plus active (active and not resigned) and inactive (not active)
    counts, each split by gender. The two groups are not complements."""
    stats = EmployeeStats()
    for emp in employees:
        male, female = _is_male(emp), _is_female(emp)

        stats.total_employees += 1
        stats.total_male += male
        stats.total_female += female

        if emp.is_active and not emp.is_resigned:
            stats.active_employees += 1
            stats.active_male += male
            stats.active_female += female

        if not emp.is_active:
            stats.inactive_employees += 1
            stats.inactive_male += male
            stats.inactive_female += female
    return stats


def calculate_leave_stats(leave_requests: Sequence[LeaveRecord]) -> LeaveStats:
    stats = LeaveStats()
    for leave in leave_requests:
        status = leave.normalized_status
        if status is LeaveStatus.pending:
            stats.pending_leaves += 1
        elif status is LeaveStatus.approved:
            stats.approved_leaves += 1
        else:
            stats.declined_leaves += 1
    return stats


def calculate_recruitment_stats(candidates: Sequence[CandidateRecord]) -> RecruitmentStats:
    stats = RecruitmentStats()
    for candidate in candidates:
        stage = candidate.current_stage
        if stage == RecruitmentStage.screening.value:
            stats.screening += 1
        elif stage in _INTERVIEW_STAGES:
            stats.interview += 1
        elif stage == RecruitmentStage.offering.value:
            stats.offering += 1
    return stats


def calculate_department_breakdown(
    employees: Sequence[EmployeeRecord],
) -> list[DepartmentBreakdownItem]:
    """Active, non-resigned headcount per department, largest first."""
    counts: dict[str, dict[str, int]] = defaultdict(lambda: {"count": 0, "male": 0, "female": 0})
    for emp in employees:
        if not emp.is_active or emp.is_resigned:
            continue
        bucket = counts[emp.department_label]
        bucket["count"] += 1
        bucket["male"] += _is_male(emp)
        bucket["female"] += _is_female(emp)

    total = sum(bucket["count"] for bucket in counts.values())
    items = [
        DepartmentBreakdownItem(
            department_name=name,
            percentage=float(_percentage(bucket["count"], total)),
            **bucket,
        )
        for name, bucket in counts.items()
    ]
    items.sort(key=lambda item: (-item.count, item.department_name))
    return items


def calculate_monthly_headcount(
    employees: Sequence[EmployeeRecord],
    now: Optional[datetime] = None,
    months: int = HEADCOUNT_TREND_MONTHS,
) -> HeadcountTrend:
    """Month-end headcount for the trailing months including the current one.

    ``total`` counts everyone who had joined by the month end; ``active``
    additionally requires no resign date, or one after the month end.
    """
    now = now or business_now()
    # Employees without a readable join date never count
    tenures = []
    for emp in employees:
        join = parse_date(emp.join_date)
        if join is not None:
            tenures.append((join, parse_date(emp.resign_date)))

    trend = HeadcountTrend()
    for month_start in trailing_month_starts(now.date(), months):
        end = month_end(month_start)
        joined = [resigned for join, resigned in tenures if join <= end]
        trend.labels.append(month_start.strftime(MONTH_LABEL_FORMAT))
        trend.month_ends.append(end)
        trend.total.append(len(joined))
        trend.active.append(sum(1 for resigned in joined if resigned is None or resigned > end))
    return trend


def calculate_turnover(employees: Sequence[EmployeeRecord]) -> TurnoverSnapshot:
    """Partition into resigned / active / inactive, resigned taking precedence."""
    snapshot = TurnoverSnapshot(total=len(employees))
    for emp in employees:
        if emp.is_resigned:
            snapshot.resigned += 1
        elif emp.is_active:
            snapshot.active += 1
        else:
            snapshot.inactive += 1
    snapshot.turnover_rate = str(_percentage(snapshot.resigned, snapshot.total))
    return snapshot
