import pytest
import redis.exceptions
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from urlshortener.core.config import Settings
from urlshortener.db.redis_store import RedisRecordStore
from urlshortener.db.sql_store import SqlRecordStore
from urlshortener.main import create_app
from urlshortener.services.shortener import URLService


BASE_URL = "http://sho.rt"

# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeRedis:
    """Minimal stand-in for the redis.Redis calls the record store makes."""

    def __init__(self, fail=False):
        self.data = {}
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise redis.exceptions.ConnectionError("Connection refused")

    def get(self, key):
        self._check()
        return self.data.get(key)

    def set(self, key, value, nx=False):
        self._check()
        if nx and key in self.data:
            return None
        self.data[key] = value
        return True

    def ping(self):
        self._check()
        return True

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(DATABASE_URL=SQLALCHEMY_TEST_DATABASE_URL, BASE_URL=BASE_URL)


@pytest.fixture
def sql_store():
    """Creates a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = SqlRecordStore(engine)
    store.init_schema()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis):
    return RedisRecordStore(fake_redis, namespace="test", database="urls")


@pytest.fixture
def service(sql_store):
    return URLService(sql_store, BASE_URL)


@pytest.fixture
def client(settings, sql_store):
    """Creates a test client over the in-memory store."""
    app = create_app(settings, store=sql_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]


@pytest.fixture
def failing_redis_store():
    """Record store whose every backend call fails."""
    return RedisRecordStore(FakeRedis(fail=True))
