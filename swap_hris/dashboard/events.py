"""Employee event lists for the dashboard side widgets.

Birthdays this month, anniversaries in the next two weeks and contracts
ending within ninety days. Each list is sorted soonest first and capped.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from swap_hris.common.constants import (
    ANNIVERSARY_LOOKAHEAD_DAYS,
    CONTRACT_SOON_DAYS,
    CONTRACT_URGENT_DAYS,
    CONTRACT_WARNING_DAYS,
    EVENT_LIST_LIMIT,
    AlertPriority,
)
from swap_hris.common.dates import (
    business_now,
    days_until,
    is_same_day,
    occurrence_in_year,
    parse_date,
    to_business_time,
    years_of_service,
)
from swap_hris.core_hr.schemas import EmployeeBrief, EmployeeRecord
from swap_hris.dashboard.schemas import (
    AnniversaryItem,
    BirthdayItem,
    ContractExpiryItem,
    EmployeeEvents,
)


def contract_urgency(days_until_expiry: int) -> AlertPriority:
    if days_until_expiry <= CONTRACT_URGENT_DAYS:
        return AlertPriority.high
    if days_until_expiry <= CONTRACT_SOON_DAYS:
        return AlertPriority.medium
    return AlertPriority.low


def birthdays_this_month(
    employees: Sequence[EmployeeRecord],
    now: datetime,
    limit: int = EVENT_LIST_LIMIT,
) -> list[BirthdayItem]:
    items: list[BirthdayItem] = []
    for emp in employees:
        birth_date = parse_date(emp.birth_date) if emp.is_active else None
        if birth_date is None or birth_date.month != now.month:
            continue
        birthday = occurrence_in_year(birth_date, now.year)
        items.append(BirthdayItem(
            employee=EmployeeBrief.from_record(emp),
            birthday_date=birthday,
            is_today=is_same_day(birthday, now),
        ))
    items.sort(key=lambda item: item.birthday_date)
    return items[:limit]


def upcoming_anniversaries(
    employees: Sequence[EmployeeRecord],
    now: datetime,
    lookahead_days: int = ANNIVERSARY_LOOKAHEAD_DAYS,
    limit: int = EVENT_LIST_LIMIT,
) -> list[AnniversaryItem]:
    items: list[AnniversaryItem] = []
    for emp in employees:
        join_date = parse_date(emp.join_date) if emp.is_active else None
        if join_date is None:
            continue
        anniversary = occurrence_in_year(join_date, now.year)
        days = days_until(anniversary, now)
        if not 0 <= days <= lookahead_days:
            continue
        items.append(AnniversaryItem(
            employee=EmployeeBrief.from_record(emp),
            anniversary_date=anniversary,
            years_of_service=years_of_service(join_date, now),
            is_today=days == 0,
        ))
    items.sort(key=lambda item: item.anniversary_date)
    return items[:limit]


def contracts_expiring(
    employees: Sequence[EmployeeRecord],
    now: datetime,
    window_days: int = CONTRACT_WARNING_DAYS,
    limit: int = EVENT_LIST_LIMIT,
) -> list[ContractExpiryItem]:
    items: list[ContractExpiryItem] = []
    for emp in employees:
        contract_end = parse_date(emp.current_contract_end) if emp.is_active else None
        if contract_end is None:
            continue
        days = days_until(contract_end, now)
        if not 0 <= days <= window_days:
            continue
        items.append(ContractExpiryItem(
            employee=EmployeeBrief.from_record(emp),
            contract_end=contract_end,
            days_until_expiry=days,
            urgency=contract_urgency(days),
        ))
    items.sort(key=lambda item: item.days_until_expiry)
    return items[:limit]


def collect_employee_events(
    employees: Sequence[EmployeeRecord],
    now: Optional[datetime] = None,
) -> EmployeeEvents:
    now = to_business_time(now) if now is not None else business_now()
    return EmployeeEvents(
        birthdays_this_month=birthdays_this_month(employees, now),
        upcoming_anniversaries=upcoming_anniversaries(employees, now),
        contracts_expiring=contracts_expiring(employees, now),
    )
