import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from lunchledger.db.mongo import create_indexes, get_db
from lunchledger.main import app
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.services.ledger_service import LedgerService

TEST_DATABASE_NAME = "lunchledger_test"


@pytest_asyncio.fixture
async def mock_db():
    """In-memory database with the production indexes."""
    client = AsyncMongoMockClient()
    db = client[TEST_DATABASE_NAME]
    await create_indexes(db)
    yield db


@pytest_asyncio.fixture
async def ledger(mock_db):
    return LedgerService(mock_db, allow_overpayment=False)


@pytest_asyncio.fixture
async def users(mock_db):
    """Alice, Bob and Charlie, keyed by lowercase name."""
    repo = UserRepository(mock_db)
    created = {}
    for name, avatar in [("Alice", "🦊"), ("Bob", "🐻"), ("Charlie", "🐼")]:
        user = await repo.find_or_create_by_name(name, avatar)
        created[name.lower()] = user
    return created


@pytest.fixture
def test_client(mock_db):
    """FastAPI test client wired to the in-memory database (no startup hooks)."""
    app.dependency_overrides[get_db] = lambda: mock_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
