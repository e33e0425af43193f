"""HTTP API tests against an in-memory database."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from campus_payroll.api.app import create_app
from campus_payroll.api.dependencies import get_db_session
from campus_payroll.database import create_session_factory

from conftest import add_roster, workdays

BASE = "/api/v1"


@pytest.fixture
async def client(engine: AsyncEngine, settings) -> AsyncGenerator[AsyncClient, None]:
    factory = create_session_factory(engine)

    async with factory() as session:
        await add_roster(session)
        await session.commit()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app = create_app(settings)
    app.dependency_overrides[get_db_session] = override_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def mark_present(client: AsyncClient, employee_id: str, month: str, present: int) -> None:
    for index, day in enumerate(workdays(month)):
        response = await client.put(
            f"{BASE}/attendance",
            json={
                "employee_id": employee_id,
                "work_date": day.isoformat(),
                "status": "present" if index < present else "absent",
            },
        )
        assert response.status_code == 200, response.text


async def generate(client: AsyncClient, month: str) -> dict:
    response = await client.post(f"{BASE}/payroll/{month}/generate")
    assert response.status_code == 200, response.text
    return response.json()


def record_for(data: dict, employee_id: str) -> dict:
    return next(r for r in data["records"] if r["employee_id"] == employee_id)


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "healthy"

    async def test_ready_and_live(self, client):
        assert (await client.get("/ready")).json() == {"status": "ready"}
        assert (await client.get("/live")).json() == {"status": "alive"}


class TestSalaryConfiguration:
    async def test_default_configuration(self, client):
        response = await client.get(f"{BASE}/employees/lec-phil/salary-configuration")

        assert response.status_code == 200
        data = response.json()
        assert data["is_default"] is True
        assert Decimal(data["basic_salary"]) == Decimal("130000")
        assert Decimal(data["hourly_rate"]) == Decimal("738.6364")
        # 130000 + 5000 + 3000 - 2000
        assert Decimal(data["estimated_net"]) == Decimal("136000.00")

    async def test_save_configuration(self, client):
        response = await client.put(
            f"{BASE}/employees/stf-none/salary-configuration",
            json={"basic_salary": "88000", "tax_percent": "10", "effective_date": "2024-01-01"},
        )

        assert response.status_code == 200, response.text
        assert response.json()["is_default"] is False
        assert Decimal(response.json()["hourly_rate"]) == Decimal("500.0000")

        fetched = (await client.get(f"{BASE}/employees/stf-none/salary-configuration")).json()
        assert Decimal(fetched["basic_salary"]) == Decimal("88000")
        assert fetched["effective_date"] == "2024-01-01"
        assert Decimal(fetched["estimated_net"]) == Decimal("79200.00")

    async def test_unknown_employee(self, client):
        response = await client.get(f"{BASE}/employees/nobody/salary-configuration")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_rejects_negative_salary(self, client):
        response = await client.put(
            f"{BASE}/employees/stf-none/salary-configuration",
            json={"basic_salary": "-1"},
        )
        assert response.status_code == 422


class TestAttendance:
    async def test_mark_attendance(self, client):
        response = await client.put(
            f"{BASE}/attendance",
            json={
                "employee_id": "lec-cs",
                "work_date": "2024-04-01",
                "status": "late",
                "overtime_hours": "1.5",
                "check_in_time": "09:20",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["attendance_id"] == "lec-cs_2024-04-01"
        assert data["status"] == "late"
        assert Decimal(data["overtime_hours"]) == Decimal("1.5")

    async def test_unknown_status(self, client):
        response = await client.put(
            f"{BASE}/attendance",
            json={"employee_id": "lec-cs", "work_date": "2024-04-01", "status": "sick"},
        )
        assert response.status_code == 422

    async def test_unknown_employee(self, client):
        response = await client.put(
            f"{BASE}/attendance",
            json={"employee_id": "nobody", "work_date": "2024-04-01", "status": "present"},
        )
        assert response.status_code == 404


class TestPayroll:
    async def test_generate_month(self, client):
        await mark_present(client, "lec-phil", "2024-04", 20)

        data = await generate(client, "2024-04")

        assert data["month"] == "2024-04"
        assert data["generated_count"] == 4
        assert data["failed_count"] == 0

        record = record_for(data, "lec-phil")
        assert record["status"] == "draft"
        assert record["working_days"] == 22
        assert record["present_days"] == 20
        assert Decimal(record["daily_salary"]) == Decimal("5909.09")
        assert Decimal(record["tax_deduction"]) == Decimal("11818.18")
        assert Decimal(record["total_salary"]) == Decimal("106363.62")
        assert len(record["source_attendance_ids"]) == 22

        absent = record_for(data, "lec-cs")
        assert absent["present_days"] == 0
        assert Decimal(absent["total_salary"]) == Decimal("0.00")

    async def test_malformed_month(self, client):
        response = await client.post(f"{BASE}/payroll/2024-13/generate")

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["field"] == "month"

    async def test_approve_and_pay(self, client):
        await mark_present(client, "lec-phil", "2024-04", 20)
        record_id = record_for(await generate(client, "2024-04"), "lec-phil")["payroll_record_id"]

        approved = await client.post(
            f"{BASE}/payroll/records/{record_id}/approve", json={"approved_by": "registrar"}
        )
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"
        assert approved.json()["approved_by"] == "registrar"
        assert approved.json()["approved_at"] is not None

        again = await client.post(
            f"{BASE}/payroll/records/{record_id}/approve", json={"approved_by": "registrar"}
        )
        assert again.status_code == 409
        assert again.json()["code"] == "INVALID_TRANSITION"

        paid = await client.post(
            f"{BASE}/payroll/records/{record_id}/mark-paid", json={"actor": "bursar"}
        )
        assert paid.status_code == 200
        assert paid.json()["status"] == "paid"
        assert paid.json()["paid_at"] is not None

        fetched = await client.get(f"{BASE}/payroll/records/{record_id}")
        assert fetched.json()["status"] == "paid"

    async def test_mark_paid_requires_approval(self, client):
        record_id = (await generate(client, "2024-04"))["records"][0]["payroll_record_id"]

        response = await client.post(f"{BASE}/payroll/records/{record_id}/mark-paid")

        assert response.status_code == 409

    async def test_blank_approver(self, client):
        record_id = (await generate(client, "2024-04"))["records"][0]["payroll_record_id"]

        response = await client.post(
            f"{BASE}/payroll/records/{record_id}/approve", json={"approved_by": ""}
        )

        assert response.status_code == 422

    async def test_unknown_record(self, client):
        response = await client.get(
            f"{BASE}/payroll/records/00000000-0000-0000-0000-000000000000"
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_list_and_summary(self, client):
        await mark_present(client, "lec-phil", "2024-04", 20)
        data = await generate(client, "2024-04")
        record_id = record_for(data, "lec-phil")["payroll_record_id"]
        await client.post(
            f"{BASE}/payroll/records/{record_id}/approve", json={"approved_by": "registrar"}
        )

        listing = (await client.get(f"{BASE}/payroll/2024-04")).json()
        assert listing["total"] == 4

        response = await client.get(f"{BASE}/payroll/2024-04", params={"status": "approved"})
        approved = response.json()
        assert approved["total"] == 1
        assert approved["items"][0]["employee_id"] == "lec-phil"

        summary = (await client.get(f"{BASE}/payroll/2024-04/summary")).json()
        assert summary["counts"] == {"draft": 3, "approved": 1, "paid": 0}
        assert summary["record_count"] == 4
        assert Decimal(summary["total_payout"]) == Decimal("106363.62")
        assert Decimal(summary["paid_total"]) == Decimal("0")

    async def test_invalid_status_filter(self, client):
        response = await client.get(f"{BASE}/payroll/2024-04", params={"status": "voided"})
        assert response.status_code == 422

    async def test_notifications(self, client):
        await generate(client, "2024-04")

        response = await client.get(f"{BASE}/notifications", params={"limit": 2})

        assert response.status_code == 200
        events = response.json()
        assert len(events) == 2
        assert events[0]["event_type"] == "PayrollGenerationCompleted"
        assert events[0]["payload"]["generated_count"] == 4
        assert events[1]["event_type"] == "PayrollRecordGenerated"
