"""
DiagnoCenter HR - Salary Ledger Model

One ledger entry per employee per calendar month. Partial payments within
the month accumulate on the same entry.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    DateTime, ForeignKey, Integer, Numeric, String, Uuid,
    Enum as SQLEnum, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, AuditMixin

if TYPE_CHECKING:
    from app.models.employee import Employee


class SalaryPaymentStatus(str, Enum):
    """Settlement state of a ledger entry."""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class SalaryLedgerEntry(BaseModel, AuditMixin):
    """
    Salary paid/due for one employee in one calendar month.

    ``total_salary`` is the employee's salary when the first payment of the
    month posted; ``due_amount`` never goes below zero.
    """

    __tablename__ = "salary_ledger_entries"
    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_salary_ledger_employee_period"),
        CheckConstraint("month BETWEEN 1 AND 12", name="month_range"),
        CheckConstraint("paid_amount >= 0", name="paid_amount_non_negative"),
    )

    employee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    employee_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    center_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("diagnostic_centers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_salary: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, default=Decimal("0.00"),
    )
    due_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, default=Decimal("0.00"),
    )
    payment_status: Mapped[SalaryPaymentStatus] = mapped_column(
        SQLEnum(SalaryPaymentStatus),
        default=SalaryPaymentStatus.UNPAID,
        nullable=False,
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    employee: Mapped[Optional["Employee"]] = relationship(
        "Employee", back_populates="salary_entries",
    )

    @property
    def is_settled(self) -> bool:
        return self.paid_amount >= self.total_salary

    def __repr__(self) -> str:
        return (
            f"<SalaryLedgerEntry(employee_id={self.employee_id}, period={self.year}-{self.month:02d}, "
            f"paid={self.paid_amount}, status={self.payment_status})>"
        )
