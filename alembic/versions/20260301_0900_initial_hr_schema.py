"""Initial HR schema

Revision ID: 20260301_0900_initial_hr_schema
Revises:
Create Date: 2026-03-01 09:00:00.000000

Tables:
- diagnostic_centers: clinic branches (read-only for HR)
- employees / users: employee records and their login accounts
- employee_leaves: leave requests and review decisions
- salary_ledger_entries: one row per employee per month
- center_revenues: per-center monthly revenue aggregate
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '20260301_0900_initial_hr_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _audit():
    return [
        sa.Column('created_by_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('updated_by_id', postgresql.UUID(as_uuid=True), nullable=True),
    ]


def upgrade() -> None:
    """Create HR tables."""

    # ===========================================
    # ENUMS (member names, as stored by SQLAlchemy Enum)
    # ===========================================

    user_role = sa.Enum('SUPER_ADMIN', 'CENTER_ADMIN', 'EMPLOYEE', name='userrole')
    employee_status = sa.Enum('ACTIVE', 'INACTIVE', name='employeestatus')
    leave_type = sa.Enum('SICK', 'CASUAL', 'ANNUAL', name='leavetype')
    leave_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='leavestatus')
    payment_status = sa.Enum('UNPAID', 'PARTIAL', 'PAID', name='salarypaymentstatus')

    op.create_table(
        'diagnostic_centers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('address', sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'employees',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('center_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('diagnostic_centers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone', sa.String(30), nullable=False),
        sa.Column('position', sa.String(100), nullable=False),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('salary', sa.Numeric(12, 2), nullable=False, comment='Monthly salary'),
        sa.Column('hire_date', sa.Date, nullable=False),
        sa.Column('profile_image', sa.String(500), nullable=False),
        sa.Column('status', employee_status, nullable=False, server_default='ACTIVE'),
        *_timestamps(),
        *_audit(),
    )
    op.create_index('ix_employees_center_id', 'employees', ['center_id'])
    op.create_index('ix_employees_email', 'employees', ['email'])

    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', user_role, nullable=False, server_default='EMPLOYEE'),
        sa.Column('center_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('diagnostic_centers.id', ondelete='CASCADE'), nullable=True),
        sa.Column('employee_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_center_id', 'users', ['center_id'])

    op.create_table(
        'employee_leaves',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('employee_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('center_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('diagnostic_centers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type', leave_type, nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('reason', sa.Text, nullable=False),
        sa.Column('status', leave_status, nullable=False, server_default='PENDING'),
        sa.Column('applied_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('reviewed_by_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_employee_leaves_employee_id', 'employee_leaves', ['employee_id'])
    op.create_index('ix_employee_leaves_center_id', 'employee_leaves', ['center_id'])

    op.create_table(
        'salary_ledger_entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('employee_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('employee_name', sa.String(150), nullable=True),
        sa.Column('center_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('diagnostic_centers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('month', sa.Integer, nullable=False),
        sa.Column('year', sa.Integer, nullable=False),
        sa.Column('total_salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('due_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('payment_status', payment_status, nullable=False, server_default='UNPAID'),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        *_audit(),
        sa.UniqueConstraint('employee_id', 'month', 'year', name='uq_salary_ledger_employee_period'),
        sa.CheckConstraint('month BETWEEN 1 AND 12', name='ck_salary_ledger_entries_month_range'),
        sa.CheckConstraint('paid_amount >= 0', name='ck_salary_ledger_entries_paid_amount_non_negative'),
    )
    op.create_index('ix_salary_ledger_entries_employee_id', 'salary_ledger_entries', ['employee_id'])
    op.create_index('ix_salary_ledger_entries_center_id', 'salary_ledger_entries', ['center_id'])

    op.create_table(
        'center_revenues',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('center_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('diagnostic_centers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('month', sa.Integer, nullable=False),
        sa.Column('year', sa.Integer, nullable=False),
        sa.Column('total_revenue', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('total_cost', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('net_profit', sa.Numeric(14, 2), nullable=False, server_default='0'),
        *_timestamps(),
        sa.UniqueConstraint('center_id', 'month', 'year', name='uq_center_revenue_period'),
    )
    op.create_index('ix_center_revenues_center_id', 'center_revenues', ['center_id'])


def downgrade() -> None:
    """Drop HR tables."""
    op.drop_table('center_revenues')
    op.drop_table('salary_ledger_entries')
    op.drop_table('employee_leaves')
    op.drop_table('users')
    op.drop_table('employees')
    op.drop_table('diagnostic_centers')

    for enum_name in ('salarypaymentstatus', 'leavestatus', 'leavetype', 'employeestatus', 'userrole'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
