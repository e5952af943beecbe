"""Dashboard router — read endpoints for the HR dashboard widgets.

Reads are served from the held snapshot (loaded on first request);
``POST /refresh`` reloads every source and swaps the snapshot.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from swap_hris.common.rate_limit import limiter
from swap_hris.config import settings
from swap_hris.dashboard.schemas import (
    AlertLink,
    AlertsResponse,
    DashboardSnapshot,
    DashboardStats,
    EmployeeEvents,
    HeadcountTrend,
    TurnoverSnapshot,
)
from swap_hris.dashboard.service import DashboardService, DashboardStore
from swap_hris.database import get_session_factory
from swap_hris.leave.client import LeaveSheetClient

router = APIRouter()


def get_dashboard_store(request: Request) -> DashboardStore:
    return request.app.state.dashboard_store


def get_leave_client() -> LeaveSheetClient:
    return LeaveSheetClient()


async def current_snapshot(
    store: DashboardStore = Depends(get_dashboard_store),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    leave_client: LeaveSheetClient = Depends(get_leave_client),
) -> DashboardSnapshot:
    return await store.current(session_factory, leave_client)


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=DashboardSnapshot)
async def dashboard(snapshot: DashboardSnapshot = Depends(current_snapshot)):
    """Full dashboard snapshot: stats, charts, alerts, events and tasks."""
    return snapshot


# ── POST /refresh ───────────────────────────────────────────────────

@router.post("/refresh", response_model=DashboardSnapshot)
@limiter.limit(settings.REFRESH_RATE_LIMIT)
async def refresh_dashboard(
    request: Request,
    store: DashboardStore = Depends(get_dashboard_store),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    leave_client: LeaveSheetClient = Depends(get_leave_client),
):
    """Reload every source and replace the held snapshot."""
    return await store.refresh(session_factory, leave_client)


# ── GET /alerts ─────────────────────────────────────────────────────

@router.get("/alerts", response_model=AlertsResponse)
async def critical_alerts(snapshot: DashboardSnapshot = Depends(current_snapshot)):
    """Critical alerts ordered high → medium → low."""
    return AlertsResponse(
        generated_at=snapshot.generated_at,
        total=len(snapshot.alerts),
        data=snapshot.alerts,
    )


# ── GET /alerts/{index}/action ──────────────────────────────────────

@router.get("/alerts/{index}/action", response_model=AlertLink)
async def alert_action(
    index: int,
    snapshot: DashboardSnapshot = Depends(current_snapshot),
):
    """Where the alert's suggested action navigates to."""
    return DashboardService.resolve_alert_action(snapshot, index)


# ── GET /stats ──────────────────────────────────────────────────────

@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(snapshot: DashboardSnapshot = Depends(current_snapshot)):
    """Employee, leave, recruitment and department counts."""
    return snapshot.stats


# ── GET /headcount-trend ────────────────────────────────────────────

@router.get("/headcount-trend", response_model=HeadcountTrend)
async def headcount_trend(snapshot: DashboardSnapshot = Depends(current_snapshot)):
    """Active vs total month-end headcount for the last six months."""
    return snapshot.headcount_trend


# ── GET /turnover ───────────────────────────────────────────────────

@router.get("/turnover", response_model=TurnoverSnapshot)
async def turnover(snapshot: DashboardSnapshot = Depends(current_snapshot)):
    return snapshot.turnover


# ── GET /events ─────────────────────────────────────────────────────

@router.get("/events", response_model=EmployeeEvents)
async def employee_events(snapshot: DashboardSnapshot = Depends(current_snapshot)):
    """Birthdays this month, upcoming anniversaries, expiring contracts."""
    return snapshot.events
