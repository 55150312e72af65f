import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import tempfile
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from ingestion import IngestionService
from log_store import LogStore
from query_executor import QueryExecutor
from response_cache import ResponseCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_db_url():
    db_fd, db_path = tempfile.mkstemp(suffix=".sqlite3")
    url = f"sqlite+aiosqlite:///{db_path}"
    yield url
    os.close(db_fd)
    os.remove(db_path)


@pytest_asyncio.fixture
async def log_store(temp_db_url):
    engine = create_async_engine(temp_db_url, future=True, connect_args={"check_same_thread": False})
    store = LogStore(engine, timeout=5.0)
    await store.create_schema()
    yield store
    await engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=300, max_entries=100, clock=clock)


@pytest.fixture
def executor(log_store, cache):
    return QueryExecutor(log_store, cache)


@pytest.fixture
def ingestion(log_store, cache):
    return IngestionService(log_store, cache)
