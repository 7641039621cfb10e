"""
DiagnoCenter HR - Center Revenue Model

Per-center, per-month rollup of income, cost and profit. Salary payments
add to ``total_cost`` and subtract from ``net_profit``.
"""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class CenterRevenue(BaseModel):
    """Monthly revenue aggregate for a diagnostic center."""

    __tablename__ = "center_revenues"
    __table_args__ = (
        UniqueConstraint("center_id", "month", "year", name="uq_center_revenue_period"),
    )

    center_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("diagnostic_centers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_revenue: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0.00"),
    )
    total_cost: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0.00"),
    )
    net_profit: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2), nullable=False, default=Decimal("0.00"),
    )

    def __repr__(self) -> str:
        return (
            f"<CenterRevenue(center_id={self.center_id}, period={self.year}-{self.month:02d}, "
            f"net_profit={self.net_profit})>"
        )
