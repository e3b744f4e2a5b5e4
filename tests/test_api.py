"""API endpoint tests.

Tests the FastAPI endpoints for payroll and payslip operations.
"""

from httpx import ASGITransport, AsyncClient

from ph_payroll import __version__
from ph_payroll.api import create_app
from ph_payroll.config import Settings
from ph_payroll.rules import default_deduction_rules


def _payroll_url(pay_period_id: int) -> str:
    return f"/api/v1/pay-periods/{pay_period_id}/payroll"


class TestHealthEndpoints:
    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["deduction_rules"] == len(default_deduction_rules())
        assert data["version"] == __version__

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    async def test_not_ready_without_rules(self, tmp_path):
        app = create_app(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"))
        await app.state.database.create_all()
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as http:
            ready = await http.get("/ready")
            health = await http.get("/health")
        await app.state.database.dispose()

        assert ready.status_code == 503
        assert ready.json() == {"status": "not_ready", "reason": "no deduction rules seeded"}
        assert health.json()["status"] == "degraded"
        assert health.json()["database"] == "healthy"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.json() == {"status": "alive"}


class TestPayrollEndpoints:
    async def test_generate(self, client: AsyncClient, scenario):
        response = await client.post(_payroll_url(scenario.june_id))

        assert response.status_code == 201
        data = response.json()
        assert data["pay_period_id"] == scenario.june_id
        assert data["count"] == 2
        assert data["skipped"] == []
        assert list(data["failed"]) == [str(scenario.zero_salary_id)]

    async def test_generate_twice_creates_nothing(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))

        response = await client.post(_payroll_url(scenario.june_id))

        assert response.json()["count"] == 0
        assert len(response.json()["skipped"]) == 2

    async def test_generate_unknown_period(self, client: AsyncClient, scenario):
        response = await client.post(_payroll_url(9999))

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Pay period 9999 not found",
            "code": "PAY_PERIOD_NOT_FOUND",
            "context": {"pay_period_id": 9999},
        }

    async def test_list_serializes_money_as_strings(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id), params={"with_details": "true"})

        response = await client.get(_payroll_url(scenario.june_id))

        assert response.status_code == 200
        rows = {row["employee_id"]: row for row in response.json()}
        regular = rows[scenario.regular_id]
        assert regular["gross_income"] == "27450.00"
        assert regular["overtime_pay"] == "450.00"
        assert regular["total_deduction"] == "3235.90"
        assert regular["net_salary"] == "24214.10"

    async def test_summary(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))

        response = await client.get(f"{_payroll_url(scenario.june_id)}/summary")

        assert response.json() == {
            "pay_period_id": scenario.june_id,
            "employee_count": 2,
            "total_gross_income": "57450.00",
            "total_net_salary": "50105.70",
            "total_deductions": "7344.30",
            "total_benefits": "2000.00",
        }

    async def test_regenerate(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))

        response = await client.post(
            f"{_payroll_url(scenario.june_id)}/regenerate", params={"with_details": "true"}
        )

        assert response.status_code == 201
        assert response.json()["count"] == 2
        assert response.json()["skipped"] == []

    async def test_regenerate_unknown_period(self, client: AsyncClient, scenario):
        response = await client.post(f"{_payroll_url(9999)}/regenerate")

        assert response.status_code == 404
        assert response.json()["code"] == "PAY_PERIOD_NOT_FOUND"

    async def test_details(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id), params={"with_details": "true"})
        rows = (await client.get(_payroll_url(scenario.june_id))).json()
        payroll_id = next(r["payroll_id"] for r in rows if r["employee_id"] == scenario.regular_id)

        response = await client.get(f"/api/v1/payrolls/{payroll_id}/details")

        assert response.status_code == 200
        assert response.json() == {
            "payroll_id": payroll_id,
            "benefits": {"Phone Allowance": "500.00", "Rice Subsidy": "1500.00"},
            "leave_hours": {"Sick Leave": "16.00"},
            "total_leave_hours": "16.00",
            "overtime_hours": "2.00",
            "overtime_pay": "450.00",
            "attendance_hours": "15.50",
            "attendance_amount": "2325.00",
        }

    async def test_details_of_unknown_payroll(self, client: AsyncClient, scenario):
        response = await client.get("/api/v1/payrolls/9999/details")

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Payroll 9999 not found",
            "code": "PAYROLL_NOT_FOUND",
            "context": {"payroll_id": 9999},
        }

    async def test_delete(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id), params={"with_details": "true"})

        response = await client.delete(_payroll_url(scenario.june_id))

        assert response.json() == {"deleted": 2}
        assert (await client.get(_payroll_url(scenario.june_id))).json() == []


class TestPayslipEndpoints:
    async def test_generate_all_and_list(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))

        response = await client.post(f"/api/v1/pay-periods/{scenario.june_id}/payslips")
        listing = await client.get(f"/api/v1/pay-periods/{scenario.june_id}/payslips")

        assert response.status_code == 201
        assert response.json() == {"pay_period_id": scenario.june_id, "created": 2}
        payslips = listing.json()
        assert [p["employee_id"] for p in payslips] == [
            scenario.regular_id,
            scenario.no_position_id,
        ]
        assert payslips[0]["daily_rate"] == "1136.36"
        assert payslips[0]["take_home_pay"] == "24214.10"

    async def test_summary(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))
        await client.post(f"/api/v1/pay-periods/{scenario.june_id}/payslips")

        response = await client.get(f"/api/v1/pay-periods/{scenario.june_id}/payslips/summary")

        assert response.json() == {
            "pay_period_id": scenario.june_id,
            "payslip_count": 2,
            "total_gross_income": "57450.00",
            "total_take_home_pay": "50105.70",
            "total_deductions": "7344.30",
        }

    async def test_single_payslip_and_text(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))

        response = await client.post(
            f"/api/v1/pay-periods/{scenario.june_id}/employees/{scenario.regular_id}/payslip"
        )

        assert response.status_code == 201
        payslip = response.json()
        assert payslip["employee_name"] == "Maria Santos"
        assert payslip["withholding_tax"] == "1323.40"

        text = await client.get(f"/api/v1/payslips/{payslip['payslip_id']}/text")

        assert text.status_code == 200
        assert text.headers["content-type"].startswith("text/plain")
        assert "MOTORPH PAYSLIP" in text.text
        assert "₱24,214.10" in text.text

    async def test_payslip_without_payroll(self, client: AsyncClient, scenario):
        await client.post(_payroll_url(scenario.june_id))

        response = await client.post(
            f"/api/v1/pay-periods/{scenario.june_id}/employees/{scenario.terminated_id}/payslip"
        )

        assert response.status_code == 404

    async def test_missing_payslip_text(self, client: AsyncClient, scenario):
        response = await client.get("/api/v1/payslips/404/text")

        assert response.status_code == 404
        assert response.json()["detail"] == "Payslip 404 not found"
