"""
DiagnoCenter HR - Test Configuration

Pytest fixtures and configuration.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, List, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_async_session
from app.dependencies import get_clock, get_gateway, get_notifier
from app.models.center import DiagnosticCenter
from app.models.employee import Employee
from app.models.user import User, UserRole
from app.services.email_service import EmailMessage, EmailService
from app.services.notification_service import NotificationService
from app.services.payment_gateway import ChargeResult, ChargeStatus, PaymentGateway
from app.utils.clock import FixedClock
from app.utils.security import create_access_token, get_password_hash
from main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_PASSWORD = "Admin@1234"
EMPLOYEE_PASSWORD = "Employee@1234"

# Payments in tests post into March 2025
PAYMENT_TIME = datetime(2025, 3, 15, 10, 30, tzinfo=timezone.utc)


# ===========================================
# COLLABORATOR FAKES
# ===========================================

class FakePaymentGateway(PaymentGateway):
    """Records charges and answers with a configurable status."""

    def __init__(self):
        self.calls: List[dict] = []
        self.status = ChargeStatus.SUCCEEDED
        self.message = ""
        self.error: Optional[Exception] = None

    async def charge(self, amount_cents, currency, description, payment_token):
        self.calls.append({
            "amount_cents": amount_cents,
            "currency": currency,
            "description": description,
            "payment_token": payment_token,
        })
        if self.error:
            raise self.error
        return ChargeResult(
            status=self.status,
            charge_id=f"ch_test_{len(self.calls)}",
            message=self.message,
        )


class RecordingEmailService(EmailService):
    """Keeps sent messages in memory; ``deliver`` controls the outcome."""

    def __init__(self):
        super().__init__()
        self.sent: List[EmailMessage] = []
        self.deliver = True

    async def send_email(self, message: EmailMessage) -> bool:
        self.sent.append(message)
        return self.deliver


# ===========================================
# DATABASE / APP FIXTURES
# ===========================================

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database and session for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def email_service() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
def notifier(email_service: RecordingEmailService) -> NotificationService:
    return NotificationService(email_service=email_service)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(PAYMENT_TIME)


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    gateway: FakePaymentGateway,
    notifier: NotificationService,
    clock: FixedClock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session and collaborator overrides."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ===========================================
# DATA FIXTURES
# ===========================================

@pytest_asyncio.fixture
async def center(db_session: AsyncSession) -> DiagnosticCenter:
    center = DiagnosticCenter(
        id=uuid4(),
        name="Central Diagnostics",
        email="central@diagnocenter.com",
        phone="+1 555 0100",
        address="1 Main Street",
    )
    db_session.add(center)
    await db_session.commit()
    return center


@pytest_asyncio.fixture
async def other_center(db_session: AsyncSession) -> DiagnosticCenter:
    center = DiagnosticCenter(id=uuid4(), name="Northside Imaging")
    db_session.add(center)
    await db_session.commit()
    return center


@pytest_asyncio.fixture
async def center_admin(db_session: AsyncSession, center: DiagnosticCenter) -> User:
    user = User(
        id=uuid4(),
        name="Center Admin",
        email="admin@diagnocenter.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role=UserRole.CENTER_ADMIN,
        center_id=center.id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def super_admin(db_session: AsyncSession) -> User:
    user = User(
        id=uuid4(),
        name="Platform Admin",
        email="root@diagnocenter.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role=UserRole.SUPER_ADMIN,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def employee(db_session: AsyncSession, center: DiagnosticCenter) -> Employee:
    """Employee with a monthly salary of 1000 and a linked login account."""
    employee = Employee(
        id=uuid4(),
        center_id=center.id,
        name="Jane Doe",
        email="jane@diagnocenter.com",
        phone="+1 555 0101",
        position="Radiographer",
        department="Imaging",
        salary=Decimal("1000.00"),
        profile_image="https://img.test/jane.png",
    )
    db_session.add(employee)
    await db_session.flush()

    db_session.add(User(
        id=uuid4(),
        name=employee.name,
        email=employee.email,
        phone=employee.phone,
        hashed_password=get_password_hash(EMPLOYEE_PASSWORD),
        role=UserRole.EMPLOYEE,
        center_id=center.id,
        employee_id=employee.id,
    ))
    await db_session.commit()
    return employee


@pytest_asyncio.fixture
async def employee_user(db_session: AsyncSession, employee: Employee) -> User:
    result = await db_session.execute(select(User).where(User.employee_id == employee.id))
    return result.scalar_one()


def auth_headers_for(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(center_admin: User) -> dict:
    return auth_headers_for(center_admin)


@pytest.fixture
def super_admin_headers(super_admin: User) -> dict:
    return auth_headers_for(super_admin)


@pytest.fixture
def employee_headers(employee_user: User) -> dict:
    return auth_headers_for(employee_user)
