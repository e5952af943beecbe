"""Dashboard errors and their RFC 7807 ``application/problem+json`` rendering.

Each error class declares its HTTP status, problem ``type`` slug and title;
instances only carry the detail and optional per-field messages.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://hris.swap.co.id/errors"
PROBLEM_JSON = "application/problem+json"


class AppException(Exception):
    """Base for errors rendered as a problem detail."""

    status_code: ClassVar[int] = 500
    error_type: ClassVar[str] = "internal-error"
    title: str = "Internal Error"

    def __init__(
        self,
        detail: str,
        errors: Optional[dict[str, list[str]]] = None,
        title: Optional[str] = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.errors = errors
        if title is not None:
            self.title = title


class NotFoundException(AppException):
    """A task id or alert index that does not resolve."""

    status_code = 404
    error_type = "not-found"

    def __init__(self, entity: str, key: Any) -> None:
        super().__init__(
            f"{entity} '{key}' does not exist.",
            title=f"{entity} Not Found",
        )


class AlertDataMissing(AppException):
    """An alert whose navigation target lost the record it points at."""

    status_code = 422
    error_type = "alert-data-missing"
    title = "Alert Data Missing"

    def __init__(self, record: str) -> None:
        super().__init__(
            f"The alert has no {record} record to open.",
            errors={record: [f"{record.capitalize()} data not available."]},
        )


class UpstreamUnavailableError(AppException):
    """A remote source (the leave sheet) answered with something unusable."""

    status_code = 502
    error_type = "upstream-unavailable"
    title = "Upstream Unavailable"

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source


# ── Rendering ───────────────────────────────────────────────────────

def _problem(
    request: Request,
    *,
    status: int,
    error_type: str,
    title: str,
    detail: str,
    errors: Optional[dict[str, list[str]]] = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{error_type}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": request.url.path,
    }
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status, content=body, media_type=PROBLEM_JSON)


def _field_name(loc: Sequence[Any]) -> str:
    # ("body", "title") -> "title"; ("query", "status") -> "status"
    if len(loc) > 1:
        return ".".join(str(part) for part in loc[1:])
    return str(loc[0]) if loc else "unknown"


async def _handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return _problem(
        request,
        status=exc.status_code,
        error_type=exc.error_type,
        title=exc.title,
        detail=exc.detail,
        errors=exc.errors,
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field_errors.setdefault(_field_name(err.get("loc", ())), []).append(
            err.get("msg", "Invalid value"),
        )
    return _problem(
        request,
        status=422,
        error_type="validation-error",
        title="Validation Error",
        detail="Request validation failed.",
        errors=field_errors,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, _handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
