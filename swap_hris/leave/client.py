"""Leave tracking spreadsheet client.

Leave requests live in a Google Sheet published through an Apps Script
JSON endpoint, not in the relational store.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from swap_hris.common.exceptions import UpstreamUnavailableError
from swap_hris.config import settings
from swap_hris.leave.schemas import LeaveRecord

logger = logging.getLogger(__name__)

_ENVELOPE_KEYS = ("records", "data")


def extract_leave_rows(payload: Any) -> list[dict[str, Any]]:
    """Pull the row list out of the endpoint's payload.

    The script has answered with a bare list, ``{"records": [...]}`` and
    ``{"data": [...]}`` over time; anything else counts as no rows.
    """
    rows: Any = []
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        for key in _ENVELOPE_KEYS:
            if isinstance(payload.get(key), list):
                rows = payload[key]
                break
    return [row for row in rows if isinstance(row, dict)]


class LeaveSheetClient:
    """Async reader for the leave spreadsheet API."""

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = settings.LEAVE_API_URL if url is None else url
        self.timeout = settings.LEAVE_API_TIMEOUT_SECONDS if timeout is None else timeout
        self._transport = transport

    async def fetch_leave_requests(self) -> list[LeaveRecord]:
        """GET every leave row; raises on HTTP errors or a non-JSON body."""
        if not self.url:
            logger.warning("LEAVE_API_URL is not configured; no leave data")
            return []

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            try:
                payload = resp.json()
            except json.JSONDecodeError as exc:
                raise UpstreamUnavailableError("leave sheet", "response is not JSON") from exc

        records: list[LeaveRecord] = []
        for row in extract_leave_rows(payload):
            try:
                records.append(LeaveRecord.model_validate(row))
            except ValidationError:
                logger.debug("Skipping unreadable leave row: %r", row)
        logger.info("Fetched %d leave records", len(records))
        return records
