"""Enums and constants for SWAP HRIS — matching the values stored upstream."""

from __future__ import annotations

import enum


# ── Employee / Core HR ──────────────────────────────────────────────

class EmploymentStatus(str, enum.Enum):
    permanent = "Permanent"
    contract = "Contract"
    probation = "Probation"
    intern = "Intern"
    on_leave = "On Leave"
    resigned = "Resigned"


class GenderType(str, enum.Enum):
    male = "Male"
    female = "Female"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    """Normalized leave-request status (the sheet stores free text)."""

    pending = "Pending"
    approved = "Approved"
    declined = "Declined"


# ── Recruitment ─────────────────────────────────────────────────────

class RecruitmentStage(str, enum.Enum):
    screening = "Screening"
    hr_interview = "HR Interview"
    user_interview = "User Interview"
    offering = "Offering"


ACTIVE_CANDIDATE_STATUS = "Active"


# ── Tasks ───────────────────────────────────────────────────────────

class TaskStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class TaskPriority(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


# ── Alerts ──────────────────────────────────────────────────────────

class AlertType(str, enum.Enum):
    contract = "contract"
    birthday = "birthday"
    anniversary = "anniversary"
    probation = "probation"
    leave_pending = "leave_pending"


class AlertPriority(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


PRIORITY_RANK: dict[AlertPriority, int] = {
    AlertPriority.high: 1,
    AlertPriority.medium: 2,
    AlertPriority.low: 3,
}


class AlertPage(str, enum.Enum):
    """Pages an alert's suggested action navigates to."""

    employees = "employees"
    whatsapp_blast = "whatsapp-blast"
    leave = "leave"


# Alert rule thresholds (days)
CONTRACT_ALERT_DAYS = 30
CONTRACT_HIGH_DAYS = 7
CONTRACT_MEDIUM_DAYS = 14
ANNIVERSARY_ALERT_DAYS = 7
PROBATION_MONTHS = 3
PROBATION_WARNING_DAYS = 7
LEAVE_PENDING_ALERT_DAYS = 2
LEAVE_PENDING_HIGH_DAYS = 5

# Dashboard side widgets
ANNIVERSARY_LOOKAHEAD_DAYS = 14
CONTRACT_WARNING_DAYS = 90
CONTRACT_URGENT_DAYS = 7
CONTRACT_SOON_DAYS = 30
EVENT_LIST_LIMIT = 5
HEADCOUNT_TREND_MONTHS = 6

# ── Misc constants ──────────────────────────────────────────────────

DATE_FORMAT = "%d %b %Y"          # 15 Mar 2025
MONTH_LABEL_FORMAT = "%b %Y"      # Mar 2025
TIMEZONE = "Asia/Jakarta"
UNKNOWN_DEPARTMENT = "Unknown"
