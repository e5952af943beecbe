"""Common module — shared utilities for SWAP HRIS."""

from swap_hris.common.constants import (
    DATE_FORMAT,
    TIMEZONE,
    AlertPage,
    AlertPriority,
    AlertType,
    EmploymentStatus,
    GenderType,
    LeaveStatus,
    RecruitmentStage,
    TaskPriority,
    TaskStatus,
)
from swap_hris.common.exceptions import (
    AlertDataMissing,
    AppException,
    NotFoundException,
    UpstreamUnavailableError,
    register_exception_handlers,
)

__all__ = [
    # Constants / Enums
    "AlertPage",
    "AlertPriority",
    "AlertType",
    "EmploymentStatus",
    "GenderType",
    "LeaveStatus",
    "RecruitmentStage",
    "TaskPriority",
    "TaskStatus",
    "DATE_FORMAT",
    "TIMEZONE",
    # Exceptions
    "AlertDataMissing",
    "AppException",
    "NotFoundException",
    "UpstreamUnavailableError",
    "register_exception_handlers",
]
