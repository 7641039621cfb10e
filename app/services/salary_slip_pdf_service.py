"""
DiagnoCenter HR - Salary Slip PDF Service

Generates the salary slip attached to payment receipts.
Uses ReportLab and renders entirely in memory.
"""

import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from app.config import settings
from app.utils.dates import month_name

logger = logging.getLogger(__name__)


@dataclass
class SalarySlipData:
    """Data structure for salary slip generation."""
    employee_name: str
    employee_id: str
    month: int
    year: int
    amount: Decimal
    paid_amount: Decimal
    total_salary: Decimal
    due_amount: Decimal
    payment_status: str
    payment_date: datetime
    payment_method: Optional[str] = None
    center_name: Optional[str] = None
    charge_id: Optional[str] = None

    @property
    def period_label(self) -> str:
        return f"{month_name(self.month)} {self.year}"


def salary_slip_filename(employee_name: str, month: int, year: int) -> str:
    """Filesystem-safe attachment name, e.g. ``salary_Jane_Doe_March_2025.pdf``."""
    safe_name = re.sub(r"[^A-Za-z0-9_-]+", "_", employee_name.strip()).strip("_") or "employee"
    return f"salary_{safe_name}_{month_name(month)}_{year}.pdf"


class SalarySlipPDFService:
    """Service for generating salary slip PDFs."""

    def __init__(self):
        self.company_name = settings.app_name

    def _format_money(self, amount: Decimal) -> str:
        return f"${Decimal(amount):,.2f}"

    def generate_salary_slip(self, slip: SalarySlipData) -> bytes:
        """
        Generate a salary slip PDF.

        Args:
            slip: SalarySlipData with the payment details

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20*mm,
            leftMargin=20*mm,
            topMargin=20*mm,
            bottomMargin=20*mm,
            title=f"Salary Slip - {slip.period_label}",
        )

        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(
            'SlipTitle',
            parent=styles['Heading1'],
            fontSize=20,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#1a365d'),
            spaceAfter=12,
        )

        normal_style = ParagraphStyle(
            'SlipNormal',
            parent=styles['Normal'],
            fontSize=11,
            spaceAfter=4,
        )

        elements = []
        elements.append(Paragraph(f"<b>{escape(slip.center_name or self.company_name)}</b>", normal_style))
        elements.append(Spacer(1, 10))
        elements.append(Paragraph("Salary Slip", title_style))
        elements.append(Spacer(1, 10))
        elements.append(self._build_details_table(slip))
        elements.append(Spacer(1, 30))
        elements.append(Paragraph(
            f"Generated on {datetime.now().strftime('%B %d, %Y')} by {self.company_name}.",
            styles['Italic'],
        ))

        doc.build(elements)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.debug(f"Salary slip generated for {slip.employee_id} ({slip.period_label}), {len(pdf_bytes)} bytes")
        return pdf_bytes

    def detail_rows(self, slip: SalarySlipData) -> List[List[str]]:
        """Label/value rows of the slip body. ``Amount Paid`` is this payment."""
        rows = [
            ["Employee Name", slip.employee_name],
            ["Employee ID", slip.employee_id],
            ["Month", slip.period_label],
            ["Monthly Salary", self._format_money(slip.total_salary)],
            ["Amount Paid", self._format_money(slip.amount)],
            ["Total Paid This Month", self._format_money(slip.paid_amount)],
            ["Remaining Due", self._format_money(slip.due_amount)],
            ["Status", slip.payment_status.upper()],
            ["Payment Date", slip.payment_date.strftime('%B %d, %Y')],
        ]
        if slip.payment_method:
            rows.append(["Payment Method", slip.payment_method])
        if slip.charge_id:
            rows.append(["Reference", slip.charge_id])
        return rows

    def _build_details_table(self, slip: SalarySlipData):
        table = Table(self.detail_rows(slip), colWidths=[170, 300])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f0f4f8')),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table
