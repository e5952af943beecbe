"""Dashboard module test suite — service-level loading (concurrent fetch,
degradation, snapshot swap) and the HTTP API.

Uses the shared conftest.py pattern with in-memory SQLite and a stubbed
leave spreadsheet. Fixture rows are committed before any load because the
loader opens its own sessions.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from swap_hris.common.constants import AlertPage, AlertPriority, AlertType
from swap_hris.common.dates import business_now
from swap_hris.common.exceptions import AlertDataMissing, NotFoundException
from swap_hris.core_hr.models import Department, Employee
from swap_hris.core_hr.schemas import EmployeeBrief
from swap_hris.dashboard.schemas import Alert, AlertLink
from swap_hris.dashboard.service import DashboardService, DashboardStore
from swap_hris.recruitment.models import RecruitmentCandidate
from swap_hris.tasks.models import Task
from tests.conftest import (
    TestSessionFactory,
    _make_candidate,
    _make_department,
    _make_employee,
    make_leave_client,
)

WIB = ZoneInfo("Asia/Jakarta")
NOW = datetime(2025, 3, 10, 9, tzinfo=WIB)

LEAVE_ROWS = [
    {"namaLengkap": "Rina", "status": "Pending", "timestamp": "2025-03-03T09:00:00"},
    {"namaLengkap": "Agus", "status": "Disetujui", "timestamp": "2025-03-01T09:00:00"},
    {"namaLengkap": "Dewi", "status": "Ditolak", "timestamp": "2025-03-02T09:00:00"},
]


# ── Helpers ─────────────────────────────────────────────────────────


async def _seed(db, today: date = NOW.date()) -> dict:
    """Departments, a mix of employees, candidates and a task.

    The contract ends four days after *today* and the birthday falls on it.
    """
    eng = _make_department(name="Engineering", code="ENG")
    fin = _make_department(name="Finance", code="FIN")
    db.add_all([Department(**eng), Department(**fin)])
    await db.flush()

    expiring = _make_employee(
        full_name="Contract Budi",
        employment_status="Contract",
        current_contract_end=today + timedelta(days=4),
        department_id=eng["id"],
    )
    birthday = _make_employee(
        full_name="Birthday Sari",
        gender="Female",
        birth_date=date(1992, today.month, today.day),
        department_id=fin["id"],
    )
    resigned = _make_employee(
        full_name="Resigned Joko",
        is_resigned=True,
        resign_date=date(2025, 1, 31),
        department_id=eng["id"],
    )
    inactive = _make_employee(full_name="Inactive Tono", is_active=False)
    db.add_all([Employee(**e) for e in (expiring, birthday, resigned, inactive)])

    db.add_all([
        RecruitmentCandidate(**_make_candidate(current_stage="Screening")),
        RecruitmentCandidate(**_make_candidate(current_stage="HR Interview")),
        RecruitmentCandidate(**_make_candidate(current_stage="Offering", status="Closed")),
    ])
    db.add(Task(title="Prepare payroll", priority="high"))
    await db.commit()
    return {"expiring": expiring, "birthday": birthday}


class _BrokenLeaveClient:
    async def fetch_leave_requests(self):
        raise RuntimeError("sheet unreachable")


# ═════════════════════════════════════════════════════════════════════
# Service layer
# ═════════════════════════════════════════════════════════════════════


class TestLoadDashboard:

    async def test_snapshot_combines_every_source(self, db):
        seeded = await _seed(db)
        snapshot = await DashboardService.load_dashboard(
            TestSessionFactory, make_leave_client(LEAVE_ROWS), NOW,
        )

        assert snapshot.unavailable_sources == []
        assert snapshot.generated_at == NOW

        employees = snapshot.stats.employees
        assert employees.total_employees == 4
        assert employees.active_employees == 2
        assert employees.inactive_employees == 1
        assert employees.active_female == 1

        leave = snapshot.stats.leave
        assert (leave.pending_leaves, leave.approved_leaves, leave.declined_leaves) == (1, 1, 1)

        recruitment = snapshot.stats.recruitment
        assert (recruitment.screening, recruitment.interview, recruitment.offering) == (1, 1, 0)

        assert [d.department_name for d in snapshot.stats.departments] == ["Engineering", "Finance"]
        assert snapshot.turnover.turnover_rate == "25.0"
        assert len(snapshot.headcount_trend.labels) == 6
        assert [t.title for t in snapshot.tasks] == ["Prepare payroll"]

        types = [a.type for a in snapshot.alerts]
        assert types == [AlertType.contract, AlertType.leave_pending, AlertType.birthday]
        assert snapshot.alerts[0].employee.id == seeded["expiring"]["id"]
        assert snapshot.alerts[0].employee.department_name == "Engineering"

        assert [b.employee.full_name for b in snapshot.events.birthdays_this_month] == [
            "Birthday Sari",
        ]
        assert [c.employee.full_name for c in snapshot.events.contracts_expiring] == [
            "Contract Budi",
        ]

    async def test_failed_source_degrades_to_empty(self, db):
        await _seed(db)
        snapshot = await DashboardService.load_dashboard(
            TestSessionFactory, _BrokenLeaveClient(), NOW,
        )
        assert snapshot.unavailable_sources == ["leave"]
        assert snapshot.stats.leave.pending_leaves == 0
        assert snapshot.stats.employees.total_employees == 4
        assert AlertType.leave_pending not in [a.type for a in snapshot.alerts]

    async def test_empty_store(self):
        snapshot = await DashboardService.load_dashboard(
            TestSessionFactory, make_leave_client([]), NOW,
        )
        assert snapshot.alerts == []
        assert snapshot.turnover.turnover_rate == "0.0"
        assert snapshot.stats.departments == []

    async def test_store_refresh_replaces_snapshot(self, db):
        store = DashboardStore()
        assert store.snapshot is None

        first = await store.current(TestSessionFactory, make_leave_client([]))
        assert store.snapshot is first
        assert await store.current(TestSessionFactory, make_leave_client([])) is first

        await _seed(db)
        second = await store.refresh(TestSessionFactory, make_leave_client(LEAVE_ROWS), NOW)
        assert second is not first
        assert store.snapshot is second
        assert first.stats.employees.total_employees == 0
        assert second.stats.employees.total_employees == 4


class TestResolveAlertAction:

    async def _snapshot(self):
        return await DashboardService.load_dashboard(
            TestSessionFactory, make_leave_client(LEAVE_ROWS), NOW,
        )

    async def test_returns_alert_link(self, db):
        seeded = await _seed(db)
        snapshot = await self._snapshot()
        link = DashboardService.resolve_alert_action(snapshot, 0)
        assert link.page is AlertPage.employees
        assert link.params == {"id": str(seeded["expiring"]["id"]), "tab": "contract"}

    async def test_index_out_of_range(self):
        snapshot = await DashboardService.load_dashboard(
            TestSessionFactory, make_leave_client([]), NOW,
        )
        with pytest.raises(NotFoundException):
            DashboardService.resolve_alert_action(snapshot, 0)
        with pytest.raises(NotFoundException):
            DashboardService.resolve_alert_action(snapshot, -1)

    async def test_missing_employee_data(self):
        snapshot = await self._snapshot()
        orphan = Alert(
            type=AlertType.birthday,
            priority=AlertPriority.medium,
            title="Birthday Today: ",
            description="Send birthday wishes!",
            action="Send Wishes",
            link=AlertLink(page=AlertPage.whatsapp_blast, params={"template": "birthday"}),
            employee=EmployeeBrief(),
        )
        snapshot = snapshot.model_copy(update={"alerts": [orphan]})
        with pytest.raises(AlertDataMissing):
            DashboardService.resolve_alert_action(snapshot, 0)

    async def test_missing_leave_data(self):
        snapshot = await self._snapshot()
        orphan = Alert(
            type=AlertType.leave_pending,
            priority=AlertPriority.high,
            title="Leave Pending: ",
            description="Pending for 9 days",
            action="Review Request",
            link=AlertLink(page=AlertPage.leave),
        )
        snapshot = snapshot.model_copy(update={"alerts": [orphan]})
        with pytest.raises(AlertDataMissing):
            DashboardService.resolve_alert_action(snapshot, 0)


# ═════════════════════════════════════════════════════════════════════
# HTTP API
# ═════════════════════════════════════════════════════════════════════


class TestDashboardAPI:

    async def test_health(self, client):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    async def test_full_snapshot(self, client, db, leave_rows):
        await _seed(db, business_now().date())
        leave_rows.extend(LEAVE_ROWS)

        resp = await client.get("/api/v1/dashboard")
        assert resp.status_code == 200
        body = resp.json()
        assert body["stats"]["employees"]["total_employees"] == 4
        assert body["stats"]["leave"]["pending_leaves"] == 1
        assert body["unavailable_sources"] == []
        assert {"alerts", "events", "tasks", "headcount_trend", "turnover"} <= body.keys()

    async def test_snapshot_is_held_until_refresh(self, client, db):
        first = await client.get("/api/v1/dashboard/stats")
        assert first.json()["employees"]["total_employees"] == 0

        await _seed(db, business_now().date())
        held = await client.get("/api/v1/dashboard/stats")
        assert held.json()["employees"]["total_employees"] == 0

        refreshed = await client.post("/api/v1/dashboard/refresh")
        assert refreshed.status_code == 200
        assert refreshed.json()["stats"]["employees"]["total_employees"] == 4

        after = await client.get("/api/v1/dashboard/stats")
        assert after.json()["employees"]["total_employees"] == 4

    async def test_alerts_endpoint(self, client, db, leave_rows):
        await _seed(db, business_now().date())
        leave_rows.extend(LEAVE_ROWS)

        resp = await client.get("/api/v1/dashboard/alerts")
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == len(body["data"])
        priorities = [a["priority"] for a in body["data"]]
        rank = {"high": 1, "medium": 2, "low": 3}
        assert priorities == sorted(priorities, key=rank.__getitem__)
        assert all("href" in a["link"] for a in body["data"])

    async def test_alert_action_endpoint(self, client, db):
        seeded = await _seed(db, business_now().date())
        resp = await client.get("/api/v1/dashboard/alerts/0/action")
        assert resp.status_code == 200
        assert resp.json()["params"]["id"] == str(seeded["expiring"]["id"])

    async def test_alert_action_unknown_index(self, client):
        resp = await client.get("/api/v1/dashboard/alerts/7/action")
        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("application/problem+json")
        assert resp.json()["type"].endswith("/not-found")

    async def test_widget_endpoints(self, client, db):
        await _seed(db, business_now().date())
        trend = await client.get("/api/v1/dashboard/headcount-trend")
        assert trend.status_code == 200
        assert len(trend.json()["labels"]) == 6

        turnover = await client.get("/api/v1/dashboard/turnover")
        assert turnover.json()["total"] == 4
        assert turnover.json()["resigned"] == 1

        events = await client.get("/api/v1/dashboard/events")
        assert set(events.json()) == {
            "birthdays_this_month",
            "upcoming_anniversaries",
            "contracts_expiring",
        }

    async def test_leave_outage_is_reported_not_fatal(self, app, client, db):
        from swap_hris.dashboard.router import get_leave_client

        await _seed(db, business_now().date())
        app.dependency_overrides[get_leave_client] = lambda: make_leave_client(
            status_code=503, text="unavailable",
        )
        resp = await client.get("/api/v1/dashboard")
        assert resp.status_code == 200
        assert resp.json()["unavailable_sources"] == ["leave"]

    async def test_refresh_is_rate_limited(self, client):
        from swap_hris.config import settings

        allowed = int(settings.REFRESH_RATE_LIMIT.split("/")[0])
        for _ in range(allowed):
            assert (await client.post("/api/v1/dashboard/refresh")).status_code == 200
        resp = await client.post("/api/v1/dashboard/refresh")
        assert resp.status_code == 429
