"""
Shared fixtures: a fresh in-memory SQLite database per test, an in-process
redis stand-in, row factories, and an API client wired to both.
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (registers every table on Base.metadata)
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models.enums import PaymentMethod, TripStatus, TripType
from app.models.trip import Trip
from app.models.user import User
from app.models.vip_trip import VipTrip
from app.models.wallet import DriverWalletTransaction, PassengerWalletTransaction
from app.redis_client import get_redis
from app.services.clock import utcnow

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DEST_LAT, DEST_LNG = 24.7136, 46.6753
PICKUP_LAT, PICKUP_LNG = 24.7743, 46.7386


class MockRedis:
    """Just enough of redis.asyncio.Redis for the code under test."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def redis():
    return MockRedis()


@pytest.fixture
async def client(session_factory, redis):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_redis():
        return redis

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_redis] = override_get_redis
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c
    fastapi_app.dependency_overrides = {}


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db):
    async def _make(name: str = "Test User", **kwargs) -> User:
        user = User(name=name, **kwargs)
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest.fixture
def make_trip(db):
    async def _make(
        passenger: User,
        driver: User | None = None,
        status: TripStatus = TripStatus.PENDING,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        price: str | None = "100",
        start_date: datetime | None = None,
        features: list[str] | None = None,
        user_debt: str = "0",
        user_app_share: str = "0",
        app_share_discount: str = "0",
        discount: str = "0",
        **trip_kwargs,
    ) -> Trip:
        trip = Trip(
            status=status.value,
            type=TripType.VIPTRIP.value,
            features=features if features is not None else ["VIP"],
            start_date=start_date or utcnow() + timedelta(hours=2),
            price=Decimal(price) if price is not None else None,
            distance=12500.0,
            driver_id=driver.id if driver else None,
            vip_trip=VipTrip(
                passenger_id=passenger.id,
                pickup_location_lat=PICKUP_LAT,
                pickup_location_lng=PICKUP_LNG,
                pickup_description="King Fahd Rd",
                destination_location_lat=DEST_LAT,
                destination_location_lng=DEST_LNG,
                destination_description="Olaya St",
                payment_method=payment_method.value,
                user_debt=Decimal(user_debt),
                user_app_share=Decimal(user_app_share),
                app_share_discount=Decimal(app_share_discount),
                discount=Decimal(discount),
            ),
            **trip_kwargs,
        )
        db.add(trip)
        await db.commit()
        return trip

    return _make


@pytest.fixture
def ledger_rows(db):
    """(passenger rows, driver rows) for a trip, oldest first."""

    async def _rows(trip_id: int):
        passenger = await db.scalars(
            select(PassengerWalletTransaction)
            .where(PassengerWalletTransaction.trip_id == trip_id)
            .order_by(PassengerWalletTransaction.id)
        )
        driver = await db.scalars(
            select(DriverWalletTransaction)
            .where(DriverWalletTransaction.trip_id == trip_id)
            .order_by(DriverWalletTransaction.id)
        )
        return list(passenger), list(driver)

    return _rows
