"""
DiagnoCenter HR - Center Revenue Service

Reads the per-center monthly revenue aggregate and books salary cost into it.
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.revenue import CenterRevenue

logger = logging.getLogger(__name__)


class CenterRevenueService:
    """Service for the center revenue aggregate."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_for_period(
        self,
        center_id: uuid.UUID,
        month: int,
        year: int,
    ) -> Optional[CenterRevenue]:
        """Get the aggregate for a center and period, if one exists."""
        result = await self.db.execute(
            select(CenterRevenue)
            .where(
                CenterRevenue.center_id == center_id,
                CenterRevenue.month == month,
                CenterRevenue.year == year,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _increment(self, center_id: uuid.UUID, month: int, year: int, amount: Decimal) -> int:
        result = await self.db.execute(
            update(CenterRevenue)
            .where(
                CenterRevenue.center_id == center_id,
                CenterRevenue.month == month,
                CenterRevenue.year == year,
            )
            .values(
                total_cost=CenterRevenue.total_cost + amount,
                net_profit=CenterRevenue.net_profit - amount,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def apply_salary_cost(
        self,
        center_id: uuid.UUID,
        month: int,
        year: int,
        amount: Decimal,
    ) -> CenterRevenue:
        """
        Add ``amount`` to total cost and subtract it from net profit.

        The increment runs as a single UPDATE so concurrent payments cannot
        lose each other's cost. When the period has no row yet one is created
        with ``(amount, -amount)``; losing that insert race falls back to the
        UPDATE. Does not commit.
        """
        updated = await self._increment(center_id, month, year, amount)

        if updated == 0:
            savepoint = await self.db.begin_nested()
            try:
                self.db.add(CenterRevenue(
                    center_id=center_id,
                    month=month,
                    year=year,
                    total_revenue=Decimal("0.00"),
                    total_cost=amount,
                    net_profit=-amount,
                ))
                await self.db.flush()
                await savepoint.commit()
                logger.info(f"Created revenue aggregate for center {center_id} ({year}-{month:02d})")
            except IntegrityError:
                await savepoint.rollback()
                logger.debug(f"Revenue aggregate race for center {center_id}, retrying as update")
                await self._increment(center_id, month, year, amount)

        revenue = await self.get_for_period(center_id, month, year)
        logger.info(
            f"Booked salary cost {amount} for center {center_id} ({year}-{month:02d}): "
            f"net_profit={revenue.net_profit}"
        )
        return revenue
