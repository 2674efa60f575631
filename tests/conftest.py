'''
Pytest configuration for the FastAPI application.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any code is imported.
2. Providing a fresh in-memory SQLite database and session for each test.
3. Seeding that database with a small roster around a fixed billing cycle.
4. Providing instances of all service classes, pre-injected with the test session.
5. Providing a FastAPI TestClient whose services are replaced by mocks.
'''
import os

# Must happen before the application settings are imported
os.environ["TEST_MODE"] = "True"

import pytest
from datetime import date, timedelta
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine

from tests.constants import (
    COACH_ALICE_ID, COACH_BORIS_ID, COACH_CLARA_ID, COACH_ARCHIVED_ID,
    STUDENT_EMRE_ID, STUDENT_FATMA_ID, STUDENT_GOKHAN_ID, STUDENT_HALE_ID, STUDENT_ARCHIVED_ID,
    MONTHLY_FEE, PAYMENT_DAY, FATMA_TRANSFER_DATE, GOKHAN_PACKAGE_END, BASE_CREATED_AT,
)

from coach_payroll.main import app
from coach_payroll.common.config import settings
from coach_payroll.database.engine import build_engine, build_session_factory, create_tables
from coach_payroll.database import models as db_models
from coach_payroll.services.settings_service import SettingsService
from coach_payroll.services.payment_service import PaymentService
from coach_payroll.services.transfer_service import TransferService
from coach_payroll.services.dashboard_service import DashboardService


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio'.
    2. Promotes the scope to 'session'.
    """
    return "asyncio"


# --- 1. Database Fixtures ---

@pytest.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """A brand new in-memory database per test."""
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."

    engine = build_engine(settings.DATABASE_URL_TEST)
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session = build_session_factory(db_engine)()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


@pytest.fixture(scope="function")
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """
    Seeds the roster used by the service tests.

    Cycle (payment day 28, as of 2024-05-10): 2024-04-29 .. 2024-05-28.
    - Emre   (Alice): whole cycle, no transfers.
    - Fatma  (Boris): moved Alice -> Boris on 2024-05-14.
    - Gokhan (Boris): package ends 2024-05-08.
    - Hale   (Clara): package ended before the cycle.
    - an archived student of Clara and an archived coach, both ignored.
    """
    db_session.add(db_models.SystemSettings(
        coach_monthly_fee=MONTHLY_FEE,
        global_payment_day=PAYMENT_DAY,
    ))

    coaches = [
        (COACH_ALICE_ID, "Alice", "Aydin", True),
        (COACH_BORIS_ID, "Boris", "Bulut", True),
        (COACH_CLARA_ID, "Clara", "Cetin", True),
        (COACH_ARCHIVED_ID, "Deniz", "Demir", False),
    ]
    for index, (coach_id, first, last, active) in enumerate(coaches):
        db_session.add(db_models.Coaches(
            id=coach_id,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}@coaching.test",
            is_active=active,
            created_at=BASE_CREATED_AT + timedelta(minutes=index),
        ))

    students = [
        (STUDENT_EMRE_ID, "Emre", "Eren", COACH_ALICE_ID, date(2024, 3, 1), date(2024, 8, 31), True),
        (STUDENT_FATMA_ID, "Fatma", "Foster", COACH_BORIS_ID, date(2024, 4, 1), date(2024, 9, 30), True),
        (STUDENT_GOKHAN_ID, "Gokhan", "Gul", COACH_BORIS_ID, date(2024, 2, 9), GOKHAN_PACKAGE_END, True),
        (STUDENT_HALE_ID, "Hale", "Hart", COACH_CLARA_ID, date(2024, 1, 1), date(2024, 4, 15), True),
        (STUDENT_ARCHIVED_ID, "Ilker", "Inan", COACH_CLARA_ID, date(2024, 4, 1), date(2024, 6, 30), False),
    ]
    for index, (student_id, first, last, coach_id, start, end, active) in enumerate(students):
        db_session.add(db_models.Students(
            id=student_id,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}@students.test",
            coach_id=coach_id,
            package_months=3,
            package_start_date=start,
            package_end_date=end,
            is_active=active,
            created_at=BASE_CREATED_AT + timedelta(hours=1, minutes=index),
        ))

    db_session.add(db_models.CoachTransfers(
        student_id=STUDENT_FATMA_ID,
        old_coach_id=COACH_ALICE_ID,
        new_coach_id=COACH_BORIS_ID,
        transfer_date=FATMA_TRANSFER_DATE,
        notes="Schedule clash with Alice.",
    ))
    await db_session.flush()
    return db_session


# --- 2. Service Fixtures ---

@pytest.fixture(scope="function")
def settings_service(seeded_db: AsyncSession) -> SettingsService:
    return SettingsService(db=seeded_db)

@pytest.fixture(scope="function")
def payment_service(seeded_db: AsyncSession, settings_service: SettingsService) -> PaymentService:
    return PaymentService(db=seeded_db, settings_service=settings_service)

@pytest.fixture(scope="function")
def transfer_service(seeded_db: AsyncSession) -> TransferService:
    return TransferService(db=seeded_db)

@pytest.fixture(scope="function")
def dashboard_service(seeded_db: AsyncSession, settings_service: SettingsService) -> DashboardService:
    return DashboardService(db=seeded_db, settings_service=settings_service)


# --- 3. API Fixtures ---

@pytest.fixture(scope="function")
def mock_payment_service() -> PaymentService:
    mock_service = MagicMock(spec=PaymentService)
    mock_service.get_current_cycle_payments = AsyncMock()
    mock_service.save_payment_records = AsyncMock()
    mock_service.mark_payment_as_paid = AsyncMock()
    mock_service.get_payment_history = AsyncMock(return_value=[])
    return mock_service

@pytest.fixture(scope="function")
def mock_transfer_service() -> TransferService:
    mock_service = MagicMock(spec=TransferService)
    mock_service.transfer_student_coach = AsyncMock()
    mock_service.get_student_transfer_history = AsyncMock(return_value=[])
    return mock_service

@pytest.fixture(scope="function")
def mock_settings_service() -> SettingsService:
    mock_service = MagicMock(spec=SettingsService)
    mock_service.get_settings_for_api = AsyncMock()
    mock_service.update_settings = AsyncMock()
    return mock_service

@pytest.fixture(scope="function")
def mock_dashboard_service() -> DashboardService:
    mock_service = MagicMock(spec=DashboardService)
    mock_service.get_stats = AsyncMock()
    mock_service.get_renewal_alerts = AsyncMock(return_value=[])
    return mock_service

@pytest.fixture(scope="function")
def client(
    mock_payment_service: PaymentService,
    mock_transfer_service: TransferService,
    mock_settings_service: SettingsService,
    mock_dashboard_service: DashboardService,
) -> TestClient:
    """
    Runs the app's lifespan and swaps every service dependency for a mock,
    so endpoint tests exercise routing, validation and serialization only.
    """
    app.dependency_overrides[PaymentService] = lambda: mock_payment_service
    app.dependency_overrides[TransferService] = lambda: mock_transfer_service
    app.dependency_overrides[SettingsService] = lambda: mock_settings_service
    app.dependency_overrides[DashboardService] = lambda: mock_dashboard_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
