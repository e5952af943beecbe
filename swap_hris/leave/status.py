"""Leave status normalization.

The leave sheet stores free text in English and Indonesian. Anything not
recognisably approved or declined counts as pending, including blanks.
"""

from __future__ import annotations

from typing import Any

from swap_hris.common.constants import LeaveStatus

_APPROVED_MARKERS = ("approved", "disetujui")
_DECLINED_MARKERS = ("declined", "rejected", "ditolak")


def normalize_leave_status(status: Any) -> LeaveStatus:
    if not status:
        return LeaveStatus.pending
    text = str(status).lower().strip()
    if any(marker in text for marker in _APPROVED_MARKERS):
        return LeaveStatus.approved
    if any(marker in text for marker in _DECLINED_MARKERS):
        return LeaveStatus.declined
    return LeaveStatus.pending
