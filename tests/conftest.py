"""
Pytest configuration and fixtures for testing.
"""
import math
import os

# Settings are read at import time, so configure the environment first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Dict
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from sportshub.main import app
from sportshub.db.session import Base, get_session
from sportshub.core.exceptions import GeoResolutionError
from sportshub.core.security import create_access_token
from sportshub.db.models import Event, Review, RoleEnum, Sport, SportLevel, User
from sportshub.geo.resolver import GeoPoint, get_geo_resolver
from sportshub.geo.spherical import EARTH_RADIUS_MILES
from datetime import datetime, timedelta


# Test database URL - use environment variable if available (for Docker)
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///./test_sportshub.db"
)

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

BEVERLY_HILLS = GeoPoint(
    longitude=-118.4065,
    latitude=34.0901,
    formatted_address="Beverly Hills, CA 90210, US",
    city="Beverly Hills",
    state="CA",
    zipcode="90210",
    country="US",
)

# Due north of the 90210 center by exactly 500 miles of arc
FIVE_HUNDRED_MILES_NORTH = GeoPoint(
    longitude=BEVERLY_HILLS.longitude,
    latitude=BEVERLY_HILLS.latitude + math.degrees(500 / EARTH_RADIUS_MILES),
    formatted_address="500 miles north of Beverly Hills",
)

KNOWN_ADDRESSES: Dict[str, GeoPoint] = {
    "90210": BEVERLY_HILLS,
    "Beverly Hills, CA": BEVERLY_HILLS,
    "1600 Amphitheatre Parkway, Mountain View, CA": GeoPoint(
        longitude=-122.0842,
        latitude=37.4220,
        formatted_address="1600 Amphitheatre Pkwy, Mountain View, CA 94043, US",
        street="1600 Amphitheatre Pkwy",
        city="Mountain View",
        state="CA",
        zipcode="94043",
        country="US",
    ),
    "Santa Monica Pier, Santa Monica, CA": GeoPoint(
        longitude=-118.4973,
        latitude=34.0092,
        formatted_address="Santa Monica Pier, Santa Monica, CA 90401, US",
        city="Santa Monica",
        state="CA",
        zipcode="90401",
        country="US",
    ),
    "500 miles north": FIVE_HUNDRED_MILES_NORTH,
}


class FakeGeoResolver:
    """In-memory stand-in for the MapQuest-backed resolver."""

    def __init__(self, points: Dict[str, GeoPoint]):
        self.points = dict(points)
        self.calls = []

    async def resolve(self, address: str) -> GeoPoint:
        self.calls.append(address)
        if address not in self.points:
            raise GeoResolutionError(f"No location found for '{address}'")
        return self.points[address]

    async def aclose(self) -> None:
        pass


@pytest.fixture
def geo_resolver() -> FakeGeoResolver:
    return FakeGeoResolver(KNOWN_ADDRESSES)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh schema and session for each test.
    Tables are dropped afterwards for complete isolation.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, geo_resolver: FakeGeoResolver) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client bound to the app.
    Database session and geocoder dependencies are overridden.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_geo_resolver] = lambda: geo_resolver

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(session: AsyncSession, email: str, role: RoleEnum) -> User:
    user = User(email=email, full_name=email.split("@")[0], role=role)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """User with the 'user' role (may write reviews)."""
    return await _make_user(db_session, "user@example.com", RoleEnum.user)


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "user2@example.com", RoleEnum.user)


@pytest_asyncio.fixture
async def test_publisher(db_session: AsyncSession) -> User:
    """User with the 'publisher' role (may publish one event)."""
    return await _make_user(db_session, "publisher@example.com", RoleEnum.publisher)


@pytest_asyncio.fixture
async def other_publisher(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "publisher2@example.com", RoleEnum.publisher)


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin@example.com", RoleEnum.admin)


def auth_header(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


def make_event(owner: User, name: str, point: GeoPoint, **overrides) -> Event:
    """Build an event row directly, bypassing geocoding."""
    values = dict(
        name=name,
        slug=name.lower().replace(" ", "-"),
        description=f"Description for {name}",
        date=datetime.utcnow() + timedelta(days=7),
        longitude=point.longitude,
        latitude=point.latitude,
        formatted_address=point.formatted_address,
        city=point.city,
        state=point.state,
        zipcode=point.zipcode,
        country=point.country,
        user_id=owner.id,
        exclusive_owner_id=None if owner.role == RoleEnum.admin else owner.id,
    )
    values.update(overrides)
    return Event(**values)


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_publisher: User) -> Event:
    """Event published by test_publisher in Beverly Hills."""
    event = make_event(test_publisher, "Beach Volleyball Open", BEVERLY_HILLS)
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_sport(db_session: AsyncSession, test_event: Event, test_publisher: User) -> Sport:
    sport = Sport(
        title="Volleyball",
        description="Two-on-two beach volleyball",
        rules="Rally scoring to 21",
        cost=15.0,
        level=SportLevel.intermediate,
        event_id=test_event.id,
        user_id=test_publisher.id,
    )
    db_session.add(sport)
    await db_session.commit()
    await db_session.refresh(sport)
    return sport


@pytest_asyncio.fixture
async def test_review(db_session: AsyncSession, test_event: Event, test_user: User) -> Review:
    review = Review(
        title="Great day out",
        comment="Well organised and friendly",
        rating=8,
        event_id=test_event.id,
        user_id=test_user.id,
    )
    db_session.add(review)
    await db_session.commit()
    await db_session.refresh(review)
    return review


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point photo uploads at a temporary directory."""
    from sportshub.core.config import settings
    monkeypatch.setattr(settings, "FILE_UPLOAD_PATH", str(tmp_path))
    return tmp_path


def event_payload(**overrides):
    payload = {
        "name": "Sunday Soccer League",
        "description": "Five-a-side soccer for all levels",
        "date": (datetime.utcnow() + timedelta(days=14)).isoformat(),
        "address": "1600 Amphitheatre Parkway, Mountain View, CA",
        "phone": "(650) 253-0000",
        "email": "soccer@example.com",
    }
    payload.update(overrides)
    return payload
