"""Integration fixtures: the SQL repositories on a real database.

Runs on in-memory SQLite by default; point TEST_DATABASE_URL at a
PostgreSQL database (postgresql+asyncpg://...) to run against the
production dialect.
"""

import os

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import haulbook.models  # noqa: F401
from haulbook.core.permissions import Actor, UserRole
from haulbook.database import Base
from haulbook.repositories.bookings import SQLBookingRepository
from haulbook.repositories.drivers import SQLDriverRepository
from haulbook.repositories.notifications import SQLNotificationRepository
from haulbook.repositories.users import SQLUserRepository
from tests.integration.seed import add_driver, add_user

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _sqlite_engine(url: str):
    engine = create_async_engine(url, poolclass=StaticPool)

    # pysqlite defers BEGIN, which breaks SAVEPOINT; take over transaction start
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@pytest.fixture
async def engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = _sqlite_engine(TEST_DATABASE_URL)
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as session:
        yield session
        await session.rollback()


# ==================== REPOSITORIES ====================


@pytest.fixture
def bookings(session):
    return SQLBookingRepository(session)


@pytest.fixture
def drivers(session):
    return SQLDriverRepository(session)


@pytest.fixture
def notifications(session):
    return SQLNotificationRepository(session)


@pytest.fixture
def users(session):
    return SQLUserRepository(session)


# ==================== ACTORS ====================


@pytest.fixture
async def customer_user(session):
    return await add_user(session, "customer@example.com", UserRole.CUSTOMER, "Asha Customer")


@pytest.fixture
async def other_customer(session):
    user = await add_user(session, "other@example.com", UserRole.CUSTOMER)
    return Actor(user_id=user.id, role=UserRole.CUSTOMER)


@pytest.fixture
async def admin_user(session):
    return await add_user(session, "ops@example.com", UserRole.ADMIN, "Ops Desk")


@pytest.fixture
async def driver_profile(session):
    return await add_driver(session, "driver@example.com", "KA01AB1234", "Ravi Driver")


@pytest.fixture
def driver(driver_profile):
    return Actor(user_id=driver_profile.user_id, role=UserRole.DRIVER, driver_id=driver_profile.id)


@pytest.fixture
async def second_driver(session):
    profile = await add_driver(session, "driver2@example.com", "KA05XY9876", "Imran Driver")
    return Actor(user_id=profile.user_id, role=UserRole.DRIVER, driver_id=profile.id)
