"""
Centralized Test Configuration.
"""

import pytest
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

import backend.app.core.redis_client as redis_client_module
from backend.app.core.security import get_password_hash
from backend.app.db.session import build_engine
from backend.app.main import create_app
from backend.app.models.enums import UserRole
from backend.app.schemas.user import UserCreate
from backend.app.services.file_storage import LocalFileStorage
from backend.app.services.notification_service import NotificationService
from backend.app.services.workflow import WorkflowService
from backend.app.store.memory import MemoryRecordStore
from backend.app.store.sql import SqlRecordStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class StepClock:
    """Deterministic clock advancing one second per reading."""
    
    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)):
        self.current = start
    
    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


# In-process stand-in for the Redis token blacklist
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False
    
    async def ping(self):
        if self._closed:
            return False
        return True
    
    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)
        
    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True
    
    async def delete(self, key):
        if key in self.store:
            del self.store[key]
            return 1
        return 0
    
    async def exists(self, key):
        return 1 if key in self.store else 0
        
    async def flushdb(self):
        self.store = {}
        
    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture(autouse=True)
async def mock_redis():
    """Patch the global redis client used by token revocation."""
    original_client = redis_client_module.redis_client
    fake = MockRedis()
    redis_client_module.redis_client = fake
    yield fake
    redis_client_module.redis_client = original_client


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def memory_store(clock):
    return MemoryRecordStore(clock=clock)


@pytest.fixture
async def sql_store(clock):
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = SqlRecordStore(engine, clock=clock)
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
async def sql_file_store(tmp_path, clock):
    """SQLite file database with the default pool, one connection per session."""
    store = SqlRecordStore(build_engine(f"sqlite+aiosqlite:///{tmp_path / 'finance.db'}"), clock=clock)
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every store-contract test runs against both implementations."""
    return request.getfixturevalue(f"{request.param}_store")


async def _make_user(store, username: str, role: UserRole, full_name: str = None, password: str = "password123"):
    return await store.create_user(UserCreate(
        username=username,
        hashed_password=get_password_hash(password),
        email=f"{username}@example.com",
        full_name=full_name or username.title(),
        role=role,
    ))


@pytest.fixture
def workflow(memory_store):
    return WorkflowService(memory_store, NotificationService(memory_store))


@pytest.fixture
def file_storage(tmp_path):
    return LocalFileStorage(
        str(tmp_path / "uploads"),
        max_bytes=1024,
        allowed_types=["application/pdf", "image/jpeg", "image/png"],
    )


@pytest.fixture
def app(memory_store, file_storage):
    return create_app(store=memory_store, file_storage=file_storage)


@pytest.fixture
async def client(app):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def _register(client, username: str, role: str = "client", full_name: str = None) -> dict:
    response = await client.post("/v1/auth/register", json={
        "email": f"{username}@test.com",
        "username": username,
        "password": "password123",
        "full_name": full_name or username.title(),
        "role": role,
    })
    assert response.status_code == 201, response.text
    return response.json()


def auth_header(token_payload: dict) -> dict:
    return {"Authorization": f"Bearer {token_payload['access_token']}"}


@pytest.fixture
def make_user():
    """Create a user directly in a store."""
    return _make_user


@pytest.fixture
def register():
    """Register a user through the API and return the token response."""
    return _register


@pytest.fixture
def auth():
    """Build the bearer header for a token response."""
    return auth_header


@pytest.fixture
async def accountant(client):
    """Registered accountant (first user, id 1)."""
    return await _register(client, "accountant", role="accountant", full_name="Comptable Admin")


@pytest.fixture
async def client_user(client, accountant):
    """Registered client (id 2)."""
    return await _register(client, "jdupont", role="client", full_name="Jean Dupont")


@pytest.fixture
async def other_client(client, client_user):
    """Second client (id 3)."""
    return await _register(client, "mmartin", role="client", full_name="Marie Martin")
