"""
DiagnoCenter HR - Employee Model

Employee records owned by exactly one diagnostic center.
"""

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Date, ForeignKey, Numeric, String, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, AuditMixin

if TYPE_CHECKING:
    from app.models.center import DiagnosticCenter
    from app.models.leave import EmployeeLeave
    from app.models.salary import SalaryLedgerEntry


class EmployeeStatus(str, Enum):
    """Employment status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Employee(BaseModel, AuditMixin):
    """
    Employee record.

    The login credentials live on the linked ``User`` account; ``salary`` is
    the live monthly salary that the ledger snapshots on first payment.
    """

    __tablename__ = "employees"

    center_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("diagnostic_centers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)

    position: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    salary: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="Monthly salary",
    )
    hire_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    profile_image: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[EmployeeStatus] = mapped_column(
        SQLEnum(EmployeeStatus),
        default=EmployeeStatus.ACTIVE,
        nullable=False,
    )

    # Relationships
    center: Mapped["DiagnosticCenter"] = relationship(
        "DiagnosticCenter", back_populates="employees",
    )
    leaves: Mapped[List["EmployeeLeave"]] = relationship(
        "EmployeeLeave", back_populates="employee", cascade="all, delete-orphan",
    )
    salary_entries: Mapped[List["SalaryLedgerEntry"]] = relationship(
        "SalaryLedgerEntry", back_populates="employee",
    )

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name={self.name}, position={self.position})>"
