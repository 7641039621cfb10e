"""
DiagnoCenter HR - Employee Service

Employee records and their linked login accounts.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.employee import Employee, EmployeeStatus
from app.models.salary import SalaryLedgerEntry
from app.models.user import User, UserRole
from app.utils.error_handling import (
    DuplicateEntryException,
    EmployeeNotFoundException,
    WeakPasswordException,
)
from app.utils.security import get_password_hash, is_strong_password

logger = logging.getLogger(__name__)

# Fields an administrator may change after hire
UPDATABLE_FIELDS = (
    "name", "email", "phone", "position", "department",
    "salary", "hire_date", "profile_image", "status",
)

# Fields copied onto the employee's login account
ACCOUNT_FIELDS = ("name", "email", "phone")


def _is_provided(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


class EmployeeService:
    """Service for hiring and managing employees."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _email_taken(self, email: str, exclude_employee_id: Optional[uuid.UUID] = None) -> bool:
        employee_query = select(Employee.id).where(Employee.email == email)
        if exclude_employee_id:
            employee_query = employee_query.where(Employee.id != exclude_employee_id)
        if (await self.db.execute(employee_query)).first():
            return True

        user_query = select(User.id).where(User.email == email)
        if exclude_employee_id:
            user_query = user_query.where(
                or_(User.employee_id.is_(None), User.employee_id != exclude_employee_id)
            )
        return (await self.db.execute(user_query)).first() is not None

    async def _get_account(self, employee_id: uuid.UUID) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.employee_id == employee_id))
        return result.scalar_one_or_none()

    async def create_employee(
        self,
        center_id: uuid.UUID,
        data: Dict[str, Any],
        created_by_id: Optional[uuid.UUID] = None,
    ) -> Employee:
        """
        Hire an employee and create the linked ``employee`` login account.

        Raises:
            DuplicateEntryException: email already used by an employee or account
            WeakPasswordException: password fails the policy
        """
        data = dict(data)
        password = data.pop("password", None)
        email = data["email"].strip().lower()
        data["email"] = email

        if await self._email_taken(email):
            raise DuplicateEntryException("Employee", "email", email)

        if not is_strong_password(password):
            raise WeakPasswordException()

        if data.get("status"):
            data["status"] = EmployeeStatus(data["status"])
        else:
            data.pop("status", None)
        if data.get("hire_date") is None:
            data.pop("hire_date", None)

        employee = Employee(
            center_id=center_id,
            created_by_id=created_by_id,
            **data,
        )
        self.db.add(employee)
        await self.db.flush()

        account = User(
            name=employee.name,
            email=email,
            phone=employee.phone,
            hashed_password=get_password_hash(password),
            role=UserRole.EMPLOYEE,
            center_id=center_id,
            employee_id=employee.id,
        )
        self.db.add(account)
        await self.db.commit()

        logger.info(f"Employee {employee.id} hired at center {center_id}")
        return await self.get_employee(employee.id)

    async def get_employee(
        self,
        employee_id: uuid.UUID,
        center_id: Optional[uuid.UUID] = None,
    ) -> Employee:
        """Get an employee with its center loaded; optionally scoped to a center."""
        query = (
            select(Employee)
            .options(selectinload(Employee.center))
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        if center_id:
            query = query.where(Employee.center_id == center_id)

        employee = (await self.db.execute(query)).scalar_one_or_none()
        if not employee:
            raise EmployeeNotFoundException(employee_id)
        return employee

    async def list_all_employees(self) -> List[Employee]:
        """All employees across centers, newest first."""
        result = await self.db.execute(
            select(Employee)
            .options(selectinload(Employee.center))
            .order_by(Employee.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_center_employees(
        self,
        center_id: uuid.UUID,
        name: Optional[str] = None,
        position: Optional[str] = None,
    ) -> List[Employee]:
        """Employees of one center with optional case-insensitive substring filters."""
        query = (
            select(Employee)
            .options(selectinload(Employee.center))
            .where(Employee.center_id == center_id)
            .execution_options(populate_existing=True)
        )
        if name:
            query = query.where(Employee.name.ilike(f"%{name}%"))
        if position:
            query = query.where(Employee.position.ilike(f"%{position}%"))

        result = await self.db.execute(query.order_by(Employee.created_at.desc()))
        return list(result.scalars().all())

    async def update_employee(
        self,
        employee_id: uuid.UUID,
        data: Dict[str, Any],
        center_id: Optional[uuid.UUID] = None,
        updated_by_id: Optional[uuid.UUID] = None,
    ) -> Employee:
        """
        Apply the provided, non-empty fields. Name, email and phone are
        mirrored onto the login account.
        """
        employee = await self.get_employee(employee_id, center_id)

        changes = {
            field: value for field, value in data.items()
            if field in UPDATABLE_FIELDS and _is_provided(value)
        }

        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
            if changes["email"] != employee.email and await self._email_taken(changes["email"], employee.id):
                raise DuplicateEntryException("Employee", "email", changes["email"])
        if "status" in changes:
            changes["status"] = EmployeeStatus(changes["status"])

        for field, value in changes.items():
            setattr(employee, field, value)
        employee.updated_by_id = updated_by_id

        account_changes = {k: v for k, v in changes.items() if k in ACCOUNT_FIELDS}
        if account_changes:
            account = await self._get_account(employee.id)
            if account:
                for field, value in account_changes.items():
                    setattr(account, field, value)

        await self.db.commit()
        logger.info(f"Employee {employee_id} updated: {sorted(changes)}")
        return await self.get_employee(employee_id)

    async def delete_employee(
        self,
        employee_id: uuid.UUID,
        center_id: Optional[uuid.UUID] = None,
    ) -> None:
        """
        Delete an employee, its login account and its leave requests.
        Ledger entries stay, detached from the employee.
        """
        query = (
            select(Employee)
            .options(
                selectinload(Employee.leaves),
                selectinload(Employee.salary_entries),
            )
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        if center_id:
            query = query.where(Employee.center_id == center_id)
        employee = (await self.db.execute(query)).scalar_one_or_none()
        if not employee:
            raise EmployeeNotFoundException(employee_id)

        account = await self._get_account(employee.id)
        if account:
            await self.db.delete(account)
        await self.db.delete(employee)
        await self.db.commit()

        logger.info(f"Employee {employee_id} deleted")

    async def get_employee_dashboard(self, employee_id: uuid.UUID) -> Dict[str, Any]:
        """Employee profile with center details and salary history (newest period first)."""
        employee = await self.get_employee(employee_id)

        result = await self.db.execute(
            select(SalaryLedgerEntry)
            .where(SalaryLedgerEntry.employee_id == employee_id)
            .order_by(SalaryLedgerEntry.year.desc(), SalaryLedgerEntry.month.desc())
        )

        return {
            "employee": employee,
            "salary_history": list(result.scalars().all()),
        }
