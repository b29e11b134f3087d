import os

# console-only logging during tests
os.environ.setdefault("APP__LOG_FILE", "")

import httpx
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from registration.config.db_session import drop_db, get_sessionmaker, init_db
from registration.config.dependencies import get_user_service
from registration.config.settings import Settings
from registration.main import create_app
from registration.messaging.welcome_publisher import WelcomePublisher
from registration.users.crud import UserRepository
from registration.users.services import UserService


# -----------------------------
# Store
# -----------------------------
@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}", poolclass=NullPool)
    await init_db(engine, synchronize=True)
    yield engine
    await drop_db(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def broken_engine(tmp_path):
    """Engine whose database has no tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", poolclass=NullPool)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_sessionmaker(engine)


@pytest.fixture
def repository(session_factory):
    return UserRepository(session_factory)


# -----------------------------
# Cache / queue fakes
# -----------------------------
@pytest.fixture
def kafka_client():
    client = MagicMock()
    client.produce = AsyncMock()
    return client


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.set = AsyncMock()
    return client


@pytest.fixture
def publisher(kafka_client):
    return WelcomePublisher(kafka_client, topic="welcome_queue")


@pytest.fixture
def user_service(repository, publisher, redis_client):
    return UserService(repository=repository, publisher=publisher, cache=redis_client)


# -----------------------------
# HTTP
# -----------------------------
@pytest.fixture
def app(user_service):
    """Application with the startup wiring replaced by test components."""
    app = create_app(Settings())
    app.dependency_overrides[get_user_service] = lambda: user_service
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
