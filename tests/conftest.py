"""Shared test fixtures — async DB, client, leave sheet stub, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL, and an
httpx.MockTransport in place of the leave spreadsheet endpoint.
"""

from __future__ import annotations

import os

# Pin the business calendar before any import touches pydantic-settings
os.environ.setdefault("BUSINESS_TIMEZONE", "Asia/Jakarta")
os.environ.setdefault("LEAVE_API_URL", "")

import uuid
from datetime import date, datetime, timezone
from typing import AsyncGenerator, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from swap_hris.dashboard.router import get_leave_client
from swap_hris.database import Base, get_db, get_session_factory
from swap_hris.leave.client import LeaveSheetClient
from swap_hris.main import create_app

# Import ALL model modules so every table exists in Base.metadata
import swap_hris.core_hr.models  # noqa: F401
import swap_hris.recruitment.models  # noqa: F401
import swap_hris.tasks.models  # noqa: F401

LEAVE_API_URL = "https://sheets.test/leave"

# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Register PG-compatible functions for SQLite
@event.listens_for(engine.sync_engine, "connect")
def _register_sqlite_functions(dbapi_conn, connection_record):
    """Register NOW() as a SQLite custom function."""
    dbapi_conn.create_function(
        "NOW", 0, lambda: datetime.now(timezone.utc).isoformat(),
    )


TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(scope="session", autouse=True)
async def _dispose_engine():
    """The StaticPool connection lives for the whole run on the session loop."""
    yield
    await engine.dispose()


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from swap_hris.common.rate_limit import limiter
    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def _override_get_session_factory() -> async_sessionmaker[AsyncSession]:
    return TestSessionFactory


# ── Leave spreadsheet stub ──────────────────────────────────────────

def leave_transport(payload=None, *, status_code: int = 200, text: Optional[str] = None):
    """MockTransport answering every request with *payload* as JSON."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=payload if payload is not None else [])

    return httpx.MockTransport(_handler)


def make_leave_client(payload=None, **kwargs) -> LeaveSheetClient:
    return LeaveSheetClient(LEAVE_API_URL, transport=leave_transport(payload, **kwargs))


@pytest.fixture
def leave_rows() -> list[dict]:
    """Rows the stubbed leave sheet serves; tests append to it."""
    return []


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(leave_rows):
    """Create a fresh app instance with DB and leave sheet overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_session_factory] = _override_get_session_factory
    application.dependency_overrides[get_leave_client] = lambda: make_leave_client(leave_rows)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_department(
    *,
    name: str = "Engineering",
    code: str = "ENG",
) -> dict:
    return dict(
        id=uuid.uuid4(),
        name=name,
        code=code,
        created_at=datetime.now(timezone.utc),
    )


def _make_employee(
    *,
    full_name: str = "Budi Santoso",
    gender: Optional[str] = "Male",
    birth_date: Optional[date] = date(1990, 6, 1),
    join_date: Optional[date] = date(2020, 6, 1),
    employment_status: str = "Permanent",
    current_contract_end: Optional[date] = None,
    resign_date: Optional[date] = None,
    is_active: bool = True,
    is_resigned: bool = False,
    department_id: Optional[uuid.UUID] = None,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        employee_code=f"SW-{uuid.uuid4().hex[:6].upper()}",
        full_name=full_name,
        phone="+6281234567890",
        gender=gender,
        birth_date=birth_date,
        join_date=join_date,
        employment_status=employment_status,
        current_contract_end=current_contract_end,
        resign_date=resign_date,
        is_active=is_active,
        is_resigned=is_resigned,
        department_id=department_id,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _make_candidate(
    *,
    candidate_name: str = "Sari Dewi",
    current_stage: str = "Screening",
    status: str = "Active",
    apply_date: date = date(2025, 2, 1),
) -> dict:
    return dict(
        id=uuid.uuid4(),
        candidate_name=candidate_name,
        position="HR Officer",
        current_stage=current_stage,
        status=status,
        apply_date=apply_date,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
async def test_department(db) -> dict:
    """Insert a test department."""
    from swap_hris.core_hr.models import Department

    data = _make_department()
    db.add(Department(**data))
    await db.flush()
    return data


@pytest.fixture
async def test_employee(db, test_department) -> dict:
    """Insert an active employee in test_department."""
    from swap_hris.core_hr.models import Employee

    data = _make_employee(department_id=test_department["id"])
    db.add(Employee(**data))
    await db.flush()
    return data
