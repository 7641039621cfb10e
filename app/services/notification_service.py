"""
DiagnoCenter HR - Notification Service

Email notifications that follow committed HR state changes:
- Salary receipts with the salary slip PDF attached
- Leave review decisions

Every send raises NotificationFailedException on failure. Callers run these
after their transaction commits and turn the exception into a
NotificationOutcome, so a failed email never undoes a payment or a review.
"""

import logging
from decimal import Decimal
from typing import Optional

from app.schemas.common import NotificationOutcome
from app.services.email_service import EmailMessage, EmailService
from app.services.salary_slip_pdf_service import (
    SalarySlipData,
    SalarySlipPDFService,
    salary_slip_filename,
)
from app.utils.error_handling import NotificationFailedException

logger = logging.getLogger(__name__)


class NotificationService:
    """Builds and dispatches HR notification emails."""

    def __init__(
        self,
        email_service: Optional[EmailService] = None,
        pdf_service: Optional[SalarySlipPDFService] = None,
    ):
        self.email_service = email_service or EmailService()
        self.pdf_service = pdf_service or SalarySlipPDFService()

    async def _deliver(self, message: EmailMessage) -> None:
        recipient = message.to[0] if message.to else None
        if not recipient:
            raise NotificationFailedException(None, "No recipient address for notification")

        try:
            sent = await self.email_service.send_email(message)
        except Exception as e:
            raise NotificationFailedException(recipient, f"Email delivery failed: {e}", original_error=e)

        if not sent:
            raise NotificationFailedException(recipient, "Email delivery failed")

    async def send_salary_receipt(
        self,
        recipient: Optional[str],
        slip: SalarySlipData,
    ) -> None:
        """Email the payment receipt with the salary slip attached."""
        try:
            pdf_bytes = self.pdf_service.generate_salary_slip(slip)
        except Exception as e:
            raise NotificationFailedException(recipient, f"Salary slip generation failed: {e}", original_error=e)

        amount_text = f"${Decimal(slip.amount):,.2f}"
        body_text = (
            f"Hello {slip.employee_name},\n\n"
            f"Your salary has been successfully paid for {slip.period_label}.\n"
            f"Amount: {amount_text}\n"
            f"Remaining due: ${Decimal(slip.due_amount):,.2f}\n\n"
            f"Your salary slip is attached."
        )
        body_html = f"""
        <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <h2>Hello {slip.employee_name},</h2>
            <p>Your salary has been successfully paid for {slip.period_label}.</p>
            <p>Amount: <strong>{amount_text}</strong></p>
            <p>Your salary slip is attached.</p>
        </body>
        </html>
        """

        await self._deliver(EmailMessage(
            to=[recipient] if recipient else [],
            subject="Your Salary Payment",
            body_text=body_text,
            body_html=body_html,
            attachments=[{
                "filename": salary_slip_filename(slip.employee_name, slip.month, slip.year),
                "content": pdf_bytes,
                "mime_type": "application/pdf",
            }],
        ))
        logger.info(f"Salary receipt sent for {slip.employee_id} ({slip.period_label})")

    async def send_leave_status(
        self,
        recipient: Optional[str],
        employee_name: str,
        leave_type: str,
        start_date,
        end_date,
        status: str,
    ) -> None:
        """Tell an employee their leave request was approved or rejected."""
        status_label = status.capitalize()
        await self._deliver(EmailMessage(
            to=[recipient] if recipient else [],
            subject=f"Leave Request {status_label}",
            body_text=(
                f"Hello {employee_name},\n\n"
                f"Your leave request for {leave_type} leave from {start_date} to {end_date} "
                f"has been {status}."
            ),
        ))
        logger.info(f"Leave status email sent: status={status}")


async def dispatch_best_effort(coro, recipient: Optional[str]) -> NotificationOutcome:
    """
    Await a notification coroutine and report its outcome.

    Only NotificationFailedException is converted; anything else propagates.
    """
    try:
        await coro
    except NotificationFailedException as e:
        logger.warning(f"Notification to {recipient} failed: {e.message}")
        return NotificationOutcome(delivered=False, recipient=recipient, error=e.message)
    return NotificationOutcome(delivered=True, recipient=recipient)


def get_notification_service() -> NotificationService:
    """Default notification service factory."""
    return NotificationService()
