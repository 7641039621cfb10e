"""
DiagnoCenter HR - Diagnostic Center Model

Centers are managed by the platform service; HR only reads them to scope
employees, leaves, salary ledgers and revenue aggregates.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.employee import Employee


class DiagnosticCenter(BaseModel):
    """A diagnostic center (clinic branch)."""

    __tablename__ = "diagnostic_centers"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    employees: Mapped[List["Employee"]] = relationship(
        "Employee", back_populates="center",
    )
