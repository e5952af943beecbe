"""Critical alert generation and prioritization.

Five independent rules run in a fixed order against one captured "now":
contract expiry, birthday today, upcoming work anniversary, probation
ending, and leave pending too long. The combined list is stably sorted by
priority, so equal-priority alerts keep rule order.

A record whose dates cannot be read contributes nothing to that rule; it
never aborts the batch.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from swap_hris.common.constants import (
    ANNIVERSARY_ALERT_DAYS,
    CONTRACT_ALERT_DAYS,
    CONTRACT_HIGH_DAYS,
    CONTRACT_MEDIUM_DAYS,
    LEAVE_PENDING_ALERT_DAYS,
    LEAVE_PENDING_HIGH_DAYS,
    PRIORITY_RANK,
    PROBATION_MONTHS,
    PROBATION_WARNING_DAYS,
    AlertPage,
    AlertPriority,
    AlertType,
    EmploymentStatus,
    LeaveStatus,
)
from swap_hris.common.dates import (
    add_months,
    business_now,
    business_timezone,
    days_since,
    days_until,
    format_display_date,
    is_same_day,
    occurrence_in_year,
    parse_date,
    parse_datetime,
    to_business_time,
    years_of_service,
)
from swap_hris.core_hr.schemas import EmployeeBrief, EmployeeRecord
from swap_hris.dashboard.schemas import Alert, AlertLink
from swap_hris.leave.schemas import LeaveRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")
Rule = Callable[[T, datetime], Optional[Alert]]


def _employee_params(employee: EmployeeRecord, id_key: str, **extra: str) -> dict[str, str]:
    params = {id_key: str(employee.id)} if employee.id else {}
    params.update(extra)
    return params


def contract_priority(days_until_expiry: int) -> AlertPriority:
    if days_until_expiry <= CONTRACT_HIGH_DAYS:
        return AlertPriority.high
    if days_until_expiry <= CONTRACT_MEDIUM_DAYS:
        return AlertPriority.medium
    return AlertPriority.low


# ── Rules ───────────────────────────────────────────────────────────

def contract_expiring_alert(employee: EmployeeRecord, now: datetime) -> Optional[Alert]:
    if not employee.is_active:
        return None
    contract_end = parse_date(employee.current_contract_end)
    if contract_end is None:
        return None

    days = days_until(contract_end, now)
    if not 0 <= days <= CONTRACT_ALERT_DAYS:
        return None

    return Alert(
        type=AlertType.contract,
        priority=contract_priority(days),
        title=f"Contract Expiring: {employee.full_name}",
        description=f"Contract ends in {days} days ({format_display_date(contract_end)})",
        action="Review & Renew",
        link=AlertLink(
            page=AlertPage.employees,
            params=_employee_params(employee, "id", tab="contract"),
        ),
        employee=EmployeeBrief.from_record(employee),
        days_remaining=days,
    )


def birthday_alert(employee: EmployeeRecord, now: datetime) -> Optional[Alert]:
    if not employee.is_active:
        return None
    birth_date = parse_date(employee.birth_date)
    if birth_date is None:
        return None
    if not is_same_day(occurrence_in_year(birth_date, now.year), now):
        return None

    return Alert(
        type=AlertType.birthday,
        priority=AlertPriority.medium,
        title=f"Birthday Today: {employee.full_name}",
        description="Send birthday wishes!",
        action="Send Wishes",
        link=AlertLink(
            page=AlertPage.whatsapp_blast,
            params={"template": "birthday", **_employee_params(employee, "employee")},
        ),
        employee=EmployeeBrief.from_record(employee),
    )


def anniversary_alert(employee: EmployeeRecord, now: datetime) -> Optional[Alert]:
    if not employee.is_active:
        return None
    join_date = parse_date(employee.join_date)
    if join_date is None:
        return None

    days = days_until(occurrence_in_year(join_date, now.year), now)
    if not 0 <= days <= ANNIVERSARY_ALERT_DAYS:
        return None

    years = years_of_service(join_date, now)
    return Alert(
        type=AlertType.anniversary,
        priority=AlertPriority.low,
        title=f"Work Anniversary: {employee.full_name}",
        description=f"{years} years of service ({format_display_date(join_date)})",
        action="Send Congratulations",
        link=AlertLink(
            page=AlertPage.whatsapp_blast,
            params={
                "template": "anniversary",
                **_employee_params(employee, "employee"),
                "years": str(years),
            },
        ),
        employee=EmployeeBrief.from_record(employee),
        days_remaining=days,
        years=years,
    )


def probation_ending_alert(employee: EmployeeRecord, now: datetime) -> Optional[Alert]:
    if not employee.is_active or employee.employment_status != EmploymentStatus.probation.value:
        return None
    join_date = parse_date(employee.join_date)
    if join_date is None:
        return None

    probation_end = add_months(join_date, PROBATION_MONTHS)
    days = days_until(probation_end, now)
    if not 0 <= days <= PROBATION_WARNING_DAYS:
        return None

    return Alert(
        type=AlertType.probation,
        priority=AlertPriority.high,
        title=f"Probation Ending: {employee.full_name}",
        description=f"Probation ends in {days} days ({format_display_date(probation_end)})",
        action="Review Performance",
        link=AlertLink(
            page=AlertPage.employees,
            params=_employee_params(employee, "id", action="review_probation"),
        ),
        employee=EmployeeBrief.from_record(employee),
        days_remaining=days,
    )


def leave_pending_alert(leave: LeaveRecord, now: datetime) -> Optional[Alert]:
    if leave.normalized_status is not LeaveStatus.pending:
        return None
    submitted_at = parse_datetime(leave.submitted_at, now.tzinfo)
    if submitted_at is None:
        return None

    days = days_since(submitted_at, now)
    if days <= LEAVE_PENDING_ALERT_DAYS:
        return None

    return Alert(
        type=AlertType.leave_pending,
        priority=AlertPriority.high if days > LEAVE_PENDING_HIGH_DAYS else AlertPriority.medium,
        title=f"Leave Pending: {leave.employee_name}",
        description=f"Pending for {days} days",
        action="Review Request",
        link=AlertLink(page=AlertPage.leave),
        leave=leave,
        days_pending=days,
    )


EMPLOYEE_RULES: tuple[Rule[EmployeeRecord], ...] = (
    contract_expiring_alert,
    birthday_alert,
    anniversary_alert,
    probation_ending_alert,
)


# ── Engine ──────────────────────────────────────────────────────────

def _evaluate(rule: Rule[T], items: Iterable[T], now: datetime) -> list[Alert]:
    alerts: list[Alert] = []
    for item in items:
        try:
            alert = rule(item, now)
        except (ValueError, TypeError, OverflowError):
            logger.debug("%s skipped an unreadable record: %r", rule.__name__, item)
            continue
        if alert is not None:
            alerts.append(alert)
    return alerts


def sort_by_priority(alerts: Sequence[Alert]) -> list[Alert]:
    """Stable sort: high, then medium, then low."""
    return sorted(alerts, key=lambda a: PRIORITY_RANK[a.priority])


def generate_critical_alerts(
    employees: Sequence[EmployeeRecord],
    leave_requests: Sequence[LeaveRecord],
    now: Optional[datetime] = None,
) -> list[Alert]:
    """Evaluate every rule against a single instant and rank the result."""
    tz = business_timezone()
    now = to_business_time(now, tz) if now is not None else business_now()

    alerts: list[Alert] = []
    for rule in EMPLOYEE_RULES:
        alerts.extend(_evaluate(rule, employees, now))
    alerts.extend(_evaluate(leave_pending_alert, leave_requests, now))

    alerts = sort_by_priority(alerts)
    logger.info("Generated %d critical alerts", len(alerts))
    return alerts
