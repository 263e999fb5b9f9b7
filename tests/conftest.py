"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator, Callable
from uuid import UUID, uuid4

import httpx
import pytest
import pytest_asyncio

from campusgig.api.app import create_app
from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.job_store import CreateJobRequest, JobStore
from campusgig.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from campusgig.application.services.profile_service import ProfileService
from campusgig.application.services.rating_ledger import RatingLedger
from campusgig.config.settings import Settings
from campusgig.domain.entities.profile import Profile
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.external.marketplace_client import MarketplaceClient

TEST_BASE_URL = "http://testserver"


@pytest.fixture
def test_settings(tmp_path):
    """Test settings with a per-test SQLite file.

    A file database gives every session its own connection, so concurrent
    transactions contend the way they do against a real server.
    """
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'campusgig.db'}",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        API_BASE_URL=TEST_BASE_URL,
    )


@pytest_asyncio.fixture
async def database(test_settings) -> AsyncGenerator[Database, None]:
    """Create test database with all tables."""
    db = Database.from_settings(test_settings)
    await db.create_all()

    yield db

    await db.dispose()


@pytest.fixture
def invalidator() -> CacheInvalidator:
    return CacheInvalidator()


@pytest.fixture
def notifications(database, invalidator) -> NotificationDispatcher:
    return NotificationDispatcher(database, invalidator)


@pytest.fixture
def job_store(database, notifications, invalidator) -> JobStore:
    return JobStore(database, notifications, invalidator)


@pytest.fixture
def rating_ledger(database, notifications, invalidator) -> RatingLedger:
    return RatingLedger(database, notifications, invalidator)


@pytest.fixture
def profile_service(database, invalidator) -> ProfileService:
    return ProfileService(database, invalidator)


@pytest.fixture
def make_profile(profile_service) -> Callable:
    """Factory registering a student profile."""
    counter = iter(range(1, 10_000))

    async def _make_profile(display_name: str = None) -> Profile:
        user_id = uuid4()
        email = f"s{next(counter):07d}@campus.example.edu"
        return await profile_service.ensure_profile(user_id, email, display_name)

    return _make_profile


@pytest_asyncio.fixture
async def poster(make_profile) -> Profile:
    return await make_profile("Poster")


@pytest_asyncio.fixture
async def helper(make_profile) -> Profile:
    return await make_profile("Helper")


@pytest.fixture
def job_request() -> CreateJobRequest:
    return CreateJobRequest(
        title="Carry boxes to dorm B",
        price=1500,
        description="Three boxes, second floor",
        urgency="Today",
        location="North Campus",
        category="Moving",
    )


@pytest_asyncio.fixture
async def open_job(job_store, poster, job_request):
    return await job_store.create_job(poster.id, job_request)


@pytest_asyncio.fixture
async def in_progress_job(job_store, open_job, helper):
    return await job_store.assign_helper(open_job.id, helper.id)


@pytest_asyncio.fixture
async def completed_job(job_store, in_progress_job, poster):
    return await job_store.complete_job(in_progress_job.id, poster.id)


@pytest.fixture
def app(test_settings, database, invalidator):
    """FastAPI app sharing the test database and invalidator."""
    return create_app(test_settings, database=database, invalidator=invalidator)


@pytest_asyncio.fixture
async def http_client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Raw HTTP client against the app, without an identity header."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url=f"{TEST_BASE_URL}/api/v1"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def make_client(app, test_settings):
    """Factory for marketplace clients acting as a given user."""
    clients = []

    def _make_client(user_id: UUID) -> MarketplaceClient:
        client = MarketplaceClient(
            user_id,
            app_settings=test_settings,
            transport=httpx.ASGITransport(app=app),
        )
        clients.append(client)
        return client

    yield _make_client

    for client in clients:
        await client.close()
