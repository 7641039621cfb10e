"""
DiagnoCenter HR - Leave Service Tests
"""

from datetime import date, datetime, timezone
from uuid import uuid4

import pytest

from app.models.leave import LeaveStatus, LeaveType
from app.services.leave_service import LeaveService
from app.utils.error_handling import (
    EmployeeNotFoundException,
    InvalidDateRangeException,
    LeaveAlreadyReviewedException,
    LeaveNotFoundException,
    ValidationException,
)


async def _apply(service, employee, start=date(2025, 4, 1), end=date(2025, 4, 5), leave_type="sick"):
    return await service.apply_leave(
        employee_id=employee.id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason="Flu",
    )


@pytest.mark.asyncio
class TestApplyLeave:
    """Tests for leave applications."""

    async def test_apply_creates_pending_request(self, db_session, employee, clock):
        service = LeaveService(db_session, clock=clock)

        leave = await _apply(service, employee, leave_type="Annual")

        assert leave.status == LeaveStatus.PENDING
        assert leave.leave_type == LeaveType.ANNUAL
        assert leave.center_id == employee.center_id
        assert leave.reviewed_at is None

    async def test_unknown_leave_type(self, db_session, employee):
        service = LeaveService(db_session)

        with pytest.raises(ValidationException) as exc_info:
            await _apply(service, employee, leave_type="sabbatical")
        assert exc_info.value.field == "leave_type"

    async def test_end_before_start(self, db_session, employee):
        service = LeaveService(db_session)

        with pytest.raises(InvalidDateRangeException):
            await _apply(service, employee, start=date(2025, 4, 5), end=date(2025, 4, 1))

    async def test_unknown_employee(self, db_session):
        service = LeaveService(db_session)

        with pytest.raises(EmployeeNotFoundException):
            await service.apply_leave(uuid4(), "sick", date(2025, 4, 1), date(2025, 4, 2), "Flu")


@pytest.mark.asyncio
class TestLeaveListings:
    """Tests for center and employee leave listings."""

    async def test_employee_listing_has_day_count(self, db_session, employee, clock):
        service = LeaveService(db_session, clock=clock)
        await _apply(service, employee)

        leaves = await service.list_employee_leaves(employee.id)

        assert len(leaves) == 1
        assert leaves[0]["days"] == 4
        assert leaves[0]["status"] == "pending"

    async def test_center_listing_newest_first_with_employee(self, db_session, employee, clock):
        service = LeaveService(db_session, clock=clock)
        await _apply(service, employee, leave_type="sick")
        clock.set(datetime(2025, 3, 16, 8, 0, tzinfo=timezone.utc))
        await _apply(service, employee, leave_type="casual")

        leaves = await service.list_center_leaves(employee.center_id)

        assert [item["leave_type"] for item in leaves] == ["casual", "sick"]
        assert leaves[0]["employee_name"] == "Jane Doe"
        assert leaves[0]["employee_email"] == "jane@diagnocenter.com"

    async def test_center_listing_excludes_other_centers(self, db_session, employee, other_center, clock):
        service = LeaveService(db_session, clock=clock)
        await _apply(service, employee)

        assert await service.list_center_leaves(other_center.id) == []


@pytest.mark.asyncio
class TestReviewLeave:
    """Tests for approving and rejecting leave."""

    async def test_approve_notifies_employee(self, db_session, employee, notifier, email_service, clock, center_admin):
        service = LeaveService(db_session, notifier=notifier, clock=clock)
        leave = await _apply(service, employee)

        reviewed, outcome = await service.review_leave(leave.id, "Approved", reviewer_id=center_admin.id)

        assert reviewed.status == LeaveStatus.APPROVED
        assert reviewed.reviewed_by_id == center_admin.id
        assert reviewed.reviewed_at is not None
        assert outcome.delivered is True
        assert email_service.sent[0].subject == "Leave Request Approved"
        assert email_service.sent[0].to == ["jane@diagnocenter.com"]

    async def test_review_is_final(self, db_session, employee, notifier, clock):
        service = LeaveService(db_session, notifier=notifier, clock=clock)
        leave = await _apply(service, employee)
        await service.review_leave(leave.id, "rejected")

        with pytest.raises(LeaveAlreadyReviewedException) as exc_info:
            await service.review_leave(leave.id, "approved")

        assert exc_info.value.status_code == 409
        assert exc_info.value.details["current_status"] == "rejected"

    async def test_invalid_status(self, db_session, employee, notifier, clock):
        service = LeaveService(db_session, notifier=notifier, clock=clock)
        leave = await _apply(service, employee)

        for status in ("pending", "maybe"):
            with pytest.raises(ValidationException):
                await service.review_leave(leave.id, status)

    async def test_unknown_leave(self, db_session, notifier):
        service = LeaveService(db_session, notifier=notifier)

        with pytest.raises(LeaveNotFoundException):
            await service.review_leave(uuid4(), "approved")

    async def test_other_center_cannot_review(self, db_session, employee, other_center, notifier, clock):
        service = LeaveService(db_session, notifier=notifier, clock=clock)
        leave = await _apply(service, employee)

        with pytest.raises(LeaveNotFoundException):
            await service.review_leave(leave.id, "approved", center_id=other_center.id)

    async def test_failed_email_keeps_decision(self, db_session, employee, notifier, email_service, clock):
        email_service.deliver = False
        service = LeaveService(db_session, notifier=notifier, clock=clock)
        leave = await _apply(service, employee)

        reviewed, outcome = await service.review_leave(leave.id, "approved")

        assert outcome.delivered is False
        assert outcome.error
        assert reviewed.status == LeaveStatus.APPROVED

    async def test_without_notifier(self, db_session, employee, clock):
        service = LeaveService(db_session, clock=clock)
        leave = await _apply(service, employee)

        _, outcome = await service.review_leave(leave.id, "rejected")

        assert outcome.delivered is False
        assert outcome.recipient == "jane@diagnocenter.com"
