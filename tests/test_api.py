"""
DiagnoCenter HR - API Endpoint Tests

Exercises the HTTP surface: authentication, role checks, response
envelopes and error envelopes.
"""

import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.models.leave import EmployeeLeave
from app.models.revenue import CenterRevenue
from app.models.user import User, UserRole
from app.services.payment_gateway import ChargeStatus
from app.utils.security import create_access_token, get_password_hash


API = "/api/v1"

ADMIN_PASSWORD = "Admin@1234"
EMPLOYEE_PASSWORD = "Employee@1234"


def _payment(employee, amount="400", **overrides) -> dict:
    body = {
        "employee_id": str(employee.id),
        "amount": amount,
        "payment_method": "card",
        "payment_token": "tok_visa",
    }
    body.update(overrides)
    return body


# =============================================================================
# HEALTH / AUTH
# =============================================================================

class TestHealthEndpoints:
    """Test health check endpoints."""

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}


class TestAuthEndpoints:
    """Test authentication endpoints."""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, center_admin):
        response = await client.post(
            f"{API}/auth/login",
            json={"email": "admin@diagnocenter.com", "password": ADMIN_PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "center_admin"

        me = await client.get(
            f"{API}/auth/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert me.status_code == 200
        assert me.json()["email"] == "admin@diagnocenter.com"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, center_admin):
        response = await client.post(
            f"{API}/auth/login",
            json={"email": "admin@diagnocenter.com", "password": "Wrong@1234"},
        )
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_employee_can_login(self, client: AsyncClient, employee):
        response = await client.post(
            f"{API}/auth/login",
            json={"email": "jane@diagnocenter.com", "password": EMPLOYEE_PASSWORD},
        )
        assert response.status_code == 200
        assert response.json()["user"]["employee_id"] == str(employee.id)

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get(f"{API}/employees")
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Not authenticated"

    @pytest.mark.asyncio
    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(f"{API}/employees", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


# =============================================================================
# EMPLOYEES
# =============================================================================

class TestEmployeeEndpoints:
    """Test employee endpoints."""

    @pytest.mark.asyncio
    async def test_create_employee(self, client: AsyncClient, admin_headers, center):
        response = await client.post(
            f"{API}/employees",
            headers=admin_headers,
            json={
                "name": "Sam Carter",
                "email": "sam@diagnocenter.com",
                "password": "Str0ng!Pass",
                "phone": "+1 555 0199",
                "position": "Lab Technician",
                "salary": "1800.00",
                "profile_image": "https://img.test/sam.png",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["employee"]["center"]["name"] == "Central Diagnostics"
        assert data["employee"]["status"] == "active"
        assert "password" not in data["employee"]
        assert "hashed_password" not in data["employee"]

        login = await client.post(
            f"{API}/auth/login",
            json={"email": "sam@diagnocenter.com", "password": "Str0ng!Pass"},
        )
        assert login.status_code == 200
        assert login.json()["user"]["role"] == "employee"

    @pytest.mark.asyncio
    async def test_create_employee_weak_password(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{API}/employees",
            headers=admin_headers,
            json={
                "name": "Sam Carter",
                "email": "sam@diagnocenter.com",
                "password": "password",
                "phone": "+1 555 0199",
                "position": "Lab Technician",
                "salary": "1800.00",
                "profile_image": "https://img.test/sam.png",
            },
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "WEAK_PASSWORD"

    @pytest.mark.asyncio
    async def test_create_employee_requires_admin(self, client: AsyncClient, employee_headers):
        response = await client.post(f"{API}/employees", headers=employee_headers, json={})
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_list_with_filters(self, client: AsyncClient, admin_headers, employee):
        response = await client.get(f"{API}/employees", headers=admin_headers, params={"position": "radio"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["employees"][0]["name"] == "Jane Doe"

        response = await client.get(f"{API}/employees", headers=admin_headers, params={"name": "zed"})
        assert response.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_list_all_super_admin_only(self, client: AsyncClient, admin_headers, super_admin_headers, employee):
        assert (await client.get(f"{API}/employees/all", headers=admin_headers)).status_code == 403

        response = await client.get(f"{API}/employees/all", headers=super_admin_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_get_update_delete(self, client: AsyncClient, admin_headers, employee):
        url = f"{API}/employees/{employee.id}"

        response = await client.get(url, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["employee"]["email"] == "jane@diagnocenter.com"

        response = await client.put(url, headers=admin_headers, json={"position": "Senior Radiographer", "name": ""})
        assert response.status_code == 200
        assert response.json()["employee"]["position"] == "Senior Radiographer"
        assert response.json()["employee"]["name"] == "Jane Doe"

        response = await client.delete(url, headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Employee deleted successfully"}

        response = await client.get(url, headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EMPLOYEE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_dashboard_own_only(self, client: AsyncClient, employee_headers, employee):
        response = await client.get(f"{API}/employees/{employee.id}/dashboard", headers=employee_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["employee"]["center"]["name"] == "Central Diagnostics"
        assert data["salary_history"] == []

        other_id = "00000000-0000-0000-0000-000000000001"
        response = await client.get(f"{API}/employees/{other_id}/dashboard", headers=employee_headers)
        assert response.status_code == 403


# =============================================================================
# SALARY
# =============================================================================

class TestSalaryEndpoints:
    """Test salary endpoints."""

    @pytest.mark.asyncio
    async def test_pay_salary(self, client: AsyncClient, admin_headers, employee, gateway, email_service):
        response = await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee))

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Salary paid, salary slip generated, and email sent."
        assert data["charge_id"] == "ch_test_1"
        assert Decimal(data["amount_charged"]) == Decimal("400")
        assert data["salary"]["payment_status"] == "partial"
        assert Decimal(data["salary"]["due_amount"]) == Decimal("600")
        assert Decimal(data["revenue"]["net_profit"]) == Decimal("-400")
        assert data["notification"]["delivered"] is True
        assert gateway.calls[0]["amount_cents"] == 40000
        assert email_service.sent[0].attachments[0]["filename"] == "salary_Jane_Doe_March_2025.pdf"

    @pytest.mark.asyncio
    async def test_pay_salary_notification_failure_still_succeeds(
        self, client: AsyncClient, admin_headers, employee, email_service
    ):
        email_service.deliver = False

        response = await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee))

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Salary paid successfully"
        assert data["notification"]["delivered"] is False
        assert data["notification"]["error"]

    @pytest.mark.asyncio
    async def test_already_paid(self, client: AsyncClient, admin_headers, employee):
        await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee, "1000"))

        response = await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee, "10"))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_PAID"

    @pytest.mark.asyncio
    async def test_insufficient_profit(self, client: AsyncClient, admin_headers, employee, db_session, gateway):
        db_session.add(CenterRevenue(
            center_id=employee.center_id,
            month=3,
            year=2025,
            total_revenue=Decimal("300.00"),
            total_cost=Decimal("0.00"),
            net_profit=Decimal("300.00"),
        ))
        await db_session.commit()

        response = await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee))

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INSUFFICIENT_PROFIT"
        assert body["error"]["message"] == "Not enough net profit to pay salary."
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_payment_declined(self, client: AsyncClient, admin_headers, employee, gateway):
        gateway.status = ChargeStatus.FAILED
        gateway.message = "Your card was declined."

        response = await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee))

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "PAYMENT_FAILED"

    @pytest.mark.asyncio
    async def test_invalid_amount(self, client: AsyncClient, admin_headers, employee, gateway):
        response = await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee, "0"))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_other_center_forbidden(self, client: AsyncClient, admin_headers, employee, other_center):
        response = await client.post(
            f"{API}/salary/payments",
            headers=admin_headers,
            json=_payment(employee, center_id=str(other_center.id)),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_due_hidden_from_other_center_admin(self, client: AsyncClient, db_session, employee, other_center):
        other_admin = User(
            id=uuid.uuid4(),
            name="Northside Admin",
            email="north@diagnocenter.com",
            hashed_password=get_password_hash(ADMIN_PASSWORD),
            role=UserRole.CENTER_ADMIN,
            center_id=other_center.id,
            is_active=True,
        )
        db_session.add(other_admin)
        await db_session.commit()
        token = create_access_token({"sub": str(other_admin.id), "role": other_admin.role.value})

        response = await client.get(
            f"{API}/salary/due",
            headers={"Authorization": f"Bearer {token}"},
            params={"employee_id": str(employee.id), "year": 2025, "month": 3},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EMPLOYEE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_employee_cannot_pay(self, client: AsyncClient, employee_headers, employee):
        response = await client.post(f"{API}/salary/payments", headers=employee_headers, json=_payment(employee))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_due(self, client: AsyncClient, admin_headers, employee):
        await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee))

        response = await client.get(
            f"{API}/salary/due",
            headers=admin_headers,
            params={"employee_id": str(employee.id), "year": 2025, "month": 3},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["employee_name"] == "Jane Doe"
        assert Decimal(data["paid_amount"]) == Decimal("400")
        assert Decimal(data["due_amount"]) == Decimal("600")

    @pytest.mark.asyncio
    async def test_sheet(self, client: AsyncClient, admin_headers, employee):
        await client.post(f"{API}/salary/payments", headers=admin_headers, json=_payment(employee))

        response = await client.get(f"{API}/salary/sheet", headers=admin_headers, params={"month": "March"})
        assert response.status_code == 200
        data = response.json()
        assert data["total_salaries"] == 1
        assert data["salaries"][0]["payment_status"] == "partial"

        response = await client.get(f"{API}/salary/sheet", headers=admin_headers, params={"month": "Smarch"})
        assert response.status_code == 422


# =============================================================================
# LEAVES
# =============================================================================

class TestLeaveEndpoints:
    """Test leave endpoints."""

    async def _apply(self, client, headers, **overrides):
        body = {"leave_type": "sick", "start_date": "2025-04-01", "end_date": "2025-04-05", "reason": "Flu"}
        body.update(overrides)
        return await client.post(f"{API}/leaves", headers=headers, json=body)

    @pytest.mark.asyncio
    async def test_apply_and_list_own(self, client: AsyncClient, employee_headers, employee):
        response = await self._apply(client, employee_headers)
        assert response.status_code == 201
        assert response.json()["leave"]["status"] == "pending"

        response = await client.get(f"{API}/leaves/employee/{employee.id}", headers=employee_headers)
        assert response.status_code == 200
        leaves = response.json()["leaves"]
        assert len(leaves) == 1
        assert leaves[0]["days"] == 4

    @pytest.mark.asyncio
    async def test_apply_invalid_dates(self, client: AsyncClient, employee_headers):
        response = await self._apply(client, employee_headers, start_date="2025-04-05", end_date="2025-04-01")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_admin_reviews_once(self, client: AsyncClient, admin_headers, employee_headers, center, email_service):
        leave_id = (await self._apply(client, employee_headers)).json()["leave"]["id"]

        listing = await client.get(f"{API}/leaves/center/{center.id}", headers=admin_headers)
        assert listing.status_code == 200
        assert listing.json()["leaves"][0]["employee_name"] == "Jane Doe"

        response = await client.patch(
            f"{API}/leaves/{leave_id}/status", headers=admin_headers, json={"status": "approved"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Leave approved successfully"
        assert data["leave"]["status"] == "approved"
        assert data["notification"]["delivered"] is True
        assert email_service.sent[-1].subject == "Leave Request Approved"

        response = await client.patch(
            f"{API}/leaves/{leave_id}/status", headers=admin_headers, json={"status": "rejected"},
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_PROCESSED"

    @pytest.mark.asyncio
    async def test_review_invalid_status(self, client: AsyncClient, admin_headers, employee_headers):
        leave_id = (await self._apply(client, employee_headers)).json()["leave"]["id"]

        response = await client.patch(
            f"{API}/leaves/{leave_id}/status", headers=admin_headers, json={"status": "maybe"},
        )
        assert response.status_code == 422
        assert response.json()["error"]["field"] == "status"

    @pytest.mark.asyncio
    async def test_other_center_listing_forbidden(self, client: AsyncClient, admin_headers, other_center):
        response = await client.get(f"{API}/leaves/center/{other_center.id}", headers=admin_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_employee_cannot_review(self, client: AsyncClient, employee_headers, db_session):
        leave_id = (await self._apply(client, employee_headers)).json()["leave"]["id"]

        response = await client.patch(
            f"{API}/leaves/{leave_id}/status", headers=employee_headers, json={"status": "approved"},
        )
        assert response.status_code == 403
        leave = await db_session.get(EmployeeLeave, uuid.UUID(leave_id))
        assert leave.status.value == "pending"
