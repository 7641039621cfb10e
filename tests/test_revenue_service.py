"""
DiagnoCenter HR - Center Revenue Service Tests
"""

from decimal import Decimal

import pytest
from sqlalchemy import select, func

from app.models.revenue import CenterRevenue
from app.services.revenue_service import CenterRevenueService


@pytest.mark.asyncio
class TestCenterRevenueService:
    """Tests for booking salary cost into the revenue aggregate."""

    async def test_missing_period_returns_none(self, db_session, center):
        service = CenterRevenueService(db_session)

        assert await service.get_for_period(center.id, 3, 2025) is None

    async def test_first_cost_creates_aggregate(self, db_session, center):
        service = CenterRevenueService(db_session)

        revenue = await service.apply_salary_cost(center.id, 3, 2025, Decimal("250.00"))
        await db_session.commit()

        assert revenue.total_revenue == Decimal("0.00")
        assert revenue.total_cost == Decimal("250.00")
        assert revenue.net_profit == Decimal("-250.00")

    async def test_existing_aggregate_is_incremented(self, db_session, center):
        db_session.add(CenterRevenue(
            center_id=center.id,
            month=3,
            year=2025,
            total_revenue=Decimal("5000.00"),
            total_cost=Decimal("1000.00"),
            net_profit=Decimal("4000.00"),
        ))
        await db_session.commit()
        service = CenterRevenueService(db_session)

        revenue = await service.apply_salary_cost(center.id, 3, 2025, Decimal("750.50"))
        await db_session.commit()

        assert revenue.total_revenue == Decimal("5000.00")
        assert revenue.total_cost == Decimal("1750.50")
        assert revenue.net_profit == Decimal("3249.50")

    async def test_repeated_costs_keep_one_row_per_period(self, db_session, center):
        service = CenterRevenueService(db_session)

        await service.apply_salary_cost(center.id, 3, 2025, Decimal("100.00"))
        await service.apply_salary_cost(center.id, 3, 2025, Decimal("200.00"))
        await service.apply_salary_cost(center.id, 4, 2025, Decimal("50.00"))
        await db_session.commit()

        count = (await db_session.execute(
            select(func.count()).select_from(CenterRevenue).where(CenterRevenue.center_id == center.id)
        )).scalar_one()
        march = await service.get_for_period(center.id, 3, 2025)

        assert count == 2
        assert march.total_cost == Decimal("300.00")
        assert march.net_profit == Decimal("-300.00")

    async def test_periods_are_scoped_per_center(self, db_session, center, other_center):
        service = CenterRevenueService(db_session)

        await service.apply_salary_cost(center.id, 3, 2025, Decimal("100.00"))
        await db_session.commit()

        assert await service.get_for_period(other_center.id, 3, 2025) is None
