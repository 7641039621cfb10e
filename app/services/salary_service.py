"""
DiagnoCenter HR - Salary Service

Salary disbursement against the monthly salary ledger.

Posting a payment:
1. Validate the request and load the employee
2. Reject when the current month is already fully paid
3. Reject when the center's net profit for the month cannot cover it
4. Charge through the payment gateway
5. Accumulate the payment on the month's ledger entry
6. Book the cost into the center revenue aggregate
7. Commit, then email the receipt and salary slip (best effort)

Nothing is written unless steps 1-4 pass.
"""

import logging
import math
import uuid
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.models.employee import Employee
from app.models.revenue import CenterRevenue
from app.models.salary import SalaryLedgerEntry, SalaryPaymentStatus
from app.schemas.common import NotificationOutcome
from app.services.notification_service import NotificationService, dispatch_best_effort
from app.services.payment_gateway import PaymentGateway
from app.services.revenue_service import CenterRevenueService
from app.services.salary_slip_pdf_service import SalarySlipData
from app.utils.clock import Clock, SystemClock
from app.utils.dates import month_name, month_number
from app.utils.error_handling import (
    AlreadyPaidException,
    ConflictException,
    EmployeeNotFoundException,
    ErrorCode,
    InsufficientProfitException,
    PaymentFailedException,
    ValidationException,
    validate_amount,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_minor_units(amount: Decimal) -> int:
    """Convert a currency amount to cents, rounding half up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def settlement_status(paid: Decimal, total: Decimal) -> SalaryPaymentStatus:
    if paid >= total:
        return SalaryPaymentStatus.PAID
    if paid > 0:
        return SalaryPaymentStatus.PARTIAL
    return SalaryPaymentStatus.UNPAID


@dataclass
class SalaryPaymentResult:
    """Outcome of a posted salary payment."""
    entry: SalaryLedgerEntry
    revenue: CenterRevenue
    amount_charged: Decimal
    charge_id: Optional[str]
    notification: NotificationOutcome


@dataclass
class DueSummary:
    """Salary owed to an employee for one month."""
    employee_name: str
    total_salary: Decimal
    paid_amount: Decimal
    due_amount: Decimal


class SalaryService:
    """
    Salary ledger service.

    The payment gateway, notification service and clock are injected so the
    ledger logic can run against fakes.
    """

    def __init__(
        self,
        db: AsyncSession,
        gateway: PaymentGateway,
        notifier: NotificationService,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.gateway = gateway
        self.notifier = notifier
        self.clock = clock or SystemClock()
        self.revenue_service = CenterRevenueService(db)

    # ===========================================
    # LOOKUPS
    # ===========================================

    async def _get_employee(self, employee_id: uuid.UUID) -> Employee:
        result = await self.db.execute(
            select(Employee)
            .options(selectinload(Employee.center))
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        employee = result.scalar_one_or_none()
        if not employee:
            raise EmployeeNotFoundException(employee_id)
        return employee

    async def get_ledger_entry(
        self,
        employee_id: uuid.UUID,
        month: int,
        year: int,
    ) -> Optional[SalaryLedgerEntry]:
        result = await self.db.execute(
            select(SalaryLedgerEntry).where(
                SalaryLedgerEntry.employee_id == employee_id,
                SalaryLedgerEntry.month == month,
                SalaryLedgerEntry.year == year,
            )
        )
        return result.scalar_one_or_none()

    # ===========================================
    # PAYMENT POSTING
    # ===========================================

    async def post_salary_payment(
        self,
        employee_id: Optional[uuid.UUID],
        center_id: Optional[uuid.UUID],
        amount: Any,
        payment_method: Optional[str],
        payment_token: Optional[str],
        payee_email: Optional[str] = None,
        employee_name: Optional[str] = None,
        paid_by_id: Optional[uuid.UUID] = None,
    ) -> SalaryPaymentResult:
        """
        Post a full or partial salary payment for the current month.

        Raises:
            ValidationException: missing fields or amount <= 0
            EmployeeNotFoundException: unknown employee
            AlreadyPaidException: the month is already fully paid
            InsufficientProfitException: net profit below the amount
            PaymentFailedException: the gateway did not succeed
            ConflictException: a concurrent first payment created the entry
        """
        if not employee_id:
            raise ValidationException("employee_id is required", field="employee_id", code=ErrorCode.MISSING_FIELD)
        if not center_id:
            raise ValidationException("center_id is required", field="center_id", code=ErrorCode.MISSING_FIELD)
        amount = validate_amount(amount)
        if not payment_token:
            raise ValidationException("payment_token is required", field="payment_token", code=ErrorCode.MISSING_FIELD)

        employee = await self._get_employee(employee_id)
        if employee.center_id != center_id:
            raise ValidationException(
                "Employee does not belong to this center",
                field="center_id",
                details={"employee_id": str(employee_id), "center_id": str(center_id)},
            )

        now = self.clock.now()
        month, year = now.month, now.year

        entry = await self.get_ledger_entry(employee_id, month, year)
        if entry is not None and entry.paid_amount >= entry.total_salary:
            logger.info(f"Salary already paid for {employee_id} ({year}-{month:02d})")
            raise AlreadyPaidException(employee_id, month, year)

        revenue = await self.revenue_service.get_for_period(center_id, month, year)
        if revenue is not None and revenue.net_profit < amount:
            logger.warning(
                f"Insufficient net profit for center {center_id} ({year}-{month:02d}): "
                f"required={amount}, available={revenue.net_profit}"
            )
            raise InsufficientProfitException(amount, revenue.net_profit)

        name = employee_name or employee.name
        charge = await self._charge(amount, name, month, year, payment_token)

        method = payment_method or "card"
        if entry is not None:
            # Increment in SQL; the row stays locked until commit
            await self.db.execute(
                update(SalaryLedgerEntry)
                .where(SalaryLedgerEntry.id == entry.id)
                .values(paid_amount=SalaryLedgerEntry.paid_amount + amount)
                .execution_options(synchronize_session=False)
            )
            await self.db.refresh(entry)
            entry.due_amount = max(entry.total_salary - entry.paid_amount, ZERO)
            entry.payment_status = settlement_status(entry.paid_amount, entry.total_salary)
            entry.payment_date = now
            entry.payment_method = method
            entry.updated_by_id = paid_by_id
        else:
            total = Decimal(employee.salary).quantize(TWO_PLACES)
            entry = SalaryLedgerEntry(
                employee_id=employee.id,
                employee_name=name,
                center_id=center_id,
                month=month,
                year=year,
                total_salary=total,
                paid_amount=amount,
                due_amount=max(total - amount, ZERO),
                payment_status=settlement_status(amount, total),
                payment_method=method,
                payment_date=now,
                created_by_id=paid_by_id,
            )
            self.db.add(entry)

        try:
            await self.db.flush()
            revenue = await self.revenue_service.apply_salary_cost(center_id, month, year, amount)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                f"Ledger write conflict for {employee_id} ({year}-{month:02d}) after charge {charge.charge_id}: {e}"
            )
            raise ConflictException(
                "A salary payment for this employee and month was posted concurrently. Please retry.",
                resource_type="Salary ledger entry",
                details={"charge_id": charge.charge_id},
            )

        logger.info(
            f"Salary payment posted: employee={employee_id}, period={year}-{month:02d}, "
            f"amount={amount}, paid={entry.paid_amount}, status={entry.payment_status.value}"
        )

        recipient = payee_email or employee.email
        slip = SalarySlipData(
            employee_name=name,
            employee_id=str(employee.id),
            month=month,
            year=year,
            amount=amount,
            paid_amount=entry.paid_amount,
            total_salary=entry.total_salary,
            due_amount=entry.due_amount,
            payment_status=entry.payment_status.value,
            payment_date=now,
            payment_method=method,
            center_name=employee.center.name if employee.center else None,
            charge_id=charge.charge_id,
        )
        notification = await dispatch_best_effort(
            self.notifier.send_salary_receipt(recipient, slip),
            recipient,
        )

        return SalaryPaymentResult(
            entry=entry,
            revenue=revenue,
            amount_charged=amount,
            charge_id=charge.charge_id,
            notification=notification,
        )

    async def _charge(
        self,
        amount: Decimal,
        employee_name: str,
        month: int,
        year: int,
        payment_token: Optional[str],
    ):
        description = f"Salary payment for {employee_name} ({month_name(month)} {year})"
        try:
            result = await self.gateway.charge(
                amount_cents=to_minor_units(amount),
                currency=settings.stripe_currency,
                description=description,
                payment_token=payment_token,
            )
        except Exception as e:
            logger.error(f"Payment gateway error: {e}")
            raise PaymentFailedException(original_error=e)

        if not result.succeeded:
            logger.warning(f"Salary charge not successful: status={result.status}, message={result.message}")
            raise PaymentFailedException(
                message=result.message or "Payment failed.",
                gateway_status=str(getattr(result.status, "value", result.status)),
            )
        return result

    # ===========================================
    # QUERIES
    # ===========================================

    async def get_due(
        self,
        employee_id: uuid.UUID,
        year: int,
        month: int,
        center_id: Optional[uuid.UUID] = None,
    ) -> DueSummary:
        """
        Salary still owed for a period: live salary minus what the ledger
        shows as paid (zero when there is no entry).

        With ``center_id`` an employee of another center is reported as not
        found.
        """
        employee = await self._get_employee(employee_id)
        if center_id and employee.center_id != center_id:
            raise EmployeeNotFoundException(employee_id)
        entry = await self.get_ledger_entry(employee_id, month, year)

        total = Decimal(employee.salary).quantize(TWO_PLACES)
        paid = Decimal(entry.paid_amount).quantize(TWO_PLACES) if entry else ZERO

        return DueSummary(
            employee_name=employee.name,
            total_salary=total,
            paid_amount=paid,
            due_amount=total - paid,
        )

    async def get_salary_history(self, employee_id: uuid.UUID) -> List[SalaryLedgerEntry]:
        """All ledger entries for an employee, newest period first."""
        result = await self.db.execute(
            select(SalaryLedgerEntry)
            .where(SalaryLedgerEntry.employee_id == employee_id)
            .order_by(SalaryLedgerEntry.year.desc(), SalaryLedgerEntry.month.desc())
        )
        return list(result.scalars().all())

    async def get_salary_sheet(
        self,
        center_id: uuid.UUID,
        name: Optional[str] = None,
        position: Optional[str] = None,
        month: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Paginated salary sheet for a center.

        ``month`` is an English month name and selects that month of the
        current year.
        """
        page = max(page or 1, 1)
        limit = limit or settings.salary_sheet_page_size
        if limit < 1:
            raise ValidationException("limit must be at least 1", field="limit")

        filters = [SalaryLedgerEntry.center_id == center_id]
        if name:
            filters.append(Employee.name.ilike(f"%{name}%"))
        if position:
            filters.append(Employee.position.ilike(f"%{position}%"))
        if month:
            month_index = month_number(month)
            if not month_index:
                raise ValidationException(f"Invalid month name: {month}", field="month")
            filters.append(SalaryLedgerEntry.month == month_index)
            filters.append(SalaryLedgerEntry.year == self.clock.now().year)

        base = (
            select(SalaryLedgerEntry, Employee)
            .join(Employee, SalaryLedgerEntry.employee_id == Employee.id)
            .where(*filters)
        )

        total = (await self.db.execute(
            select(func.count()).select_from(base.subquery())
        )).scalar_one()

        rows = (await self.db.execute(
            base.order_by(SalaryLedgerEntry.payment_date.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )).all()

        salaries = [
            {
                "id": entry.id,
                "employee_id": employee.id,
                "name": employee.name,
                "email": employee.email,
                "phone": employee.phone,
                "position": employee.position,
                "image": employee.profile_image,
                "paid_amount": entry.paid_amount,
                "due_amount": entry.due_amount,
                "payment_date": entry.payment_date,
                "payment_status": entry.payment_status.value,
                "month": entry.month,
                "year": entry.year,
                "payment_method": entry.payment_method,
            }
            for entry, employee in rows
        ]

        return {
            "salaries": salaries,
            "total_salaries": total,
            "total_pages": math.ceil(total / limit) if total else 0,
            "current_page": page,
        }
