"""
DiagnoCenter HR - Leave Service

Leave requests: employees apply, center administrators approve or reject
once. Reviewed requests are final.
"""

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.employee import Employee
from app.models.leave import EmployeeLeave, LeaveStatus, LeaveType
from app.schemas.common import NotificationOutcome
from app.services.notification_service import NotificationService, dispatch_best_effort
from app.utils.clock import Clock, SystemClock
from app.utils.dates import days_between
from app.utils.error_handling import (
    EmployeeNotFoundException,
    InvalidDateRangeException,
    LeaveAlreadyReviewedException,
    LeaveNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = (LeaveStatus.APPROVED, LeaveStatus.REJECTED)


def _leave_fields(leave: EmployeeLeave) -> Dict[str, Any]:
    return {
        "id": leave.id,
        "employee_id": leave.employee_id,
        "center_id": leave.center_id,
        "leave_type": leave.leave_type.value,
        "start_date": leave.start_date,
        "end_date": leave.end_date,
        "reason": leave.reason,
        "status": leave.status.value,
        "applied_at": leave.applied_at,
        "reviewed_at": leave.reviewed_at,
        "reviewed_by_id": leave.reviewed_by_id,
    }


class LeaveService:
    """Service for leave requests."""

    def __init__(
        self,
        db: AsyncSession,
        notifier: Optional[NotificationService] = None,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.notifier = notifier
        self.clock = clock or SystemClock()

    async def apply_leave(
        self,
        employee_id: uuid.UUID,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
        center_id: Optional[uuid.UUID] = None,
    ) -> EmployeeLeave:
        """Create a pending leave request for an employee."""
        try:
            leave_type = LeaveType(str(leave_type).lower())
        except ValueError:
            raise ValidationException(f"Invalid leave type: {leave_type}", field="leave_type")

        if end_date < start_date:
            raise InvalidDateRangeException(start_date.isoformat(), end_date.isoformat())

        if not reason or not reason.strip():
            raise ValidationException("reason is required", field="reason")

        employee = await self.db.get(Employee, employee_id)
        if not employee:
            raise EmployeeNotFoundException(employee_id)

        leave = EmployeeLeave(
            employee_id=employee.id,
            center_id=center_id or employee.center_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason.strip(),
            status=LeaveStatus.PENDING,
            applied_at=self.clock.now(),
        )
        self.db.add(leave)
        await self.db.commit()
        await self.db.refresh(leave)

        logger.info(f"Leave {leave.id} applied by employee {employee_id} ({leave_type.value})")
        return leave

    async def list_center_leaves(self, center_id: uuid.UUID) -> List[Dict[str, Any]]:
        """Leave requests of a center, newest first, with employee name and email."""
        result = await self.db.execute(
            select(EmployeeLeave)
            .options(selectinload(EmployeeLeave.employee))
            .where(EmployeeLeave.center_id == center_id)
            .order_by(EmployeeLeave.applied_at.desc())
            .execution_options(populate_existing=True)
        )
        return [
            {
                **_leave_fields(leave),
                "employee_name": leave.employee.name if leave.employee else None,
                "employee_email": leave.employee.email if leave.employee else None,
            }
            for leave in result.scalars().all()
        ]

    async def list_employee_leaves(self, employee_id: uuid.UUID) -> List[Dict[str, Any]]:
        """An employee's leave requests, newest first, each with its day count."""
        result = await self.db.execute(
            select(EmployeeLeave)
            .where(EmployeeLeave.employee_id == employee_id)
            .order_by(EmployeeLeave.applied_at.desc())
        )
        return [
            {**_leave_fields(leave), "days": days_between(leave.start_date, leave.end_date)}
            for leave in result.scalars().all()
        ]

    async def review_leave(
        self,
        leave_id: uuid.UUID,
        status: str,
        reviewer_id: Optional[uuid.UUID] = None,
        center_id: Optional[uuid.UUID] = None,
    ) -> Tuple[EmployeeLeave, NotificationOutcome]:
        """
        Approve or reject a pending request, then notify the employee.

        Raises:
            ValidationException: status is not approved/rejected
            LeaveNotFoundException: unknown leave (or another center's)
            LeaveAlreadyReviewedException: request is no longer pending
        """
        try:
            new_status = LeaveStatus(str(status).strip().lower())
        except ValueError:
            new_status = None
        if new_status not in REVIEW_OUTCOMES:
            raise ValidationException(
                "Invalid status. Use 'approved' or 'rejected'.",
                field="status",
                details={"allowed": [s.value for s in REVIEW_OUTCOMES]},
            )

        query = (
            select(EmployeeLeave)
            .options(selectinload(EmployeeLeave.employee))
            .where(EmployeeLeave.id == leave_id)
            .execution_options(populate_existing=True)
        )
        if center_id:
            query = query.where(EmployeeLeave.center_id == center_id)
        leave = (await self.db.execute(query)).scalar_one_or_none()
        if not leave:
            raise LeaveNotFoundException(leave_id)

        if leave.status.is_terminal:
            raise LeaveAlreadyReviewedException(leave.id, leave.status.value)

        leave.status = new_status
        leave.reviewed_by_id = reviewer_id
        leave.reviewed_at = self.clock.now()
        await self.db.commit()

        logger.info(f"Leave {leave.id} {new_status.value} by {reviewer_id}")

        employee = leave.employee
        recipient = employee.email if employee else None
        if self.notifier is None:
            return leave, NotificationOutcome(delivered=False, recipient=recipient, error="Notifications disabled")

        outcome = await dispatch_best_effort(
            self.notifier.send_leave_status(
                recipient,
                employee.name if employee else "",
                leave.leave_type.value,
                leave.start_date,
                leave.end_date,
                new_status.value,
            ),
            recipient,
        )
        return leave, outcome
