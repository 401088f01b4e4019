import json
from datetime import datetime, timedelta, timezone

import pytest

from urlshortener.core.config import Settings
from urlshortener.core.exceptions import StoreError
from urlshortener.db.database import build_engine, build_store
from urlshortener.db.redis_store import RedisRecordStore
from urlshortener.db.sql_store import SqlRecordStore
from urlshortener.schemas.url import UrlRecord


def make_record(short_id="abc12345", url="https://example.com", **kwargs):
    return UrlRecord(
        short_id=short_id,
        original_url=url,
        created_at=kwargs.pop("created_at", datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
        **kwargs,
    )


@pytest.fixture(params=["sql", "redis"])
def store(request, sql_store, redis_store):
    """Runs the shared contract tests against both backends."""
    return sql_store if request.param == "sql" else redis_store


def test_select_missing_returns_none(store):
    assert store.select("missing") is None


def test_create_then_select(store):
    created = store.create(make_record())
    assert created.short_id == "abc12345"

    fetched = store.select("abc12345")
    assert fetched.original_url == "https://example.com"
    assert fetched.click_count == 0
    assert fetched.last_accessed is None
    assert fetched.created_at == datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_create_does_not_overwrite(store):
    store.create(make_record(url="https://example.com/first"))
    assert store.create(make_record(url="https://example.com/second")) is None
    assert store.select("abc12345").original_url == "https://example.com/first"


def test_update_replaces_content(store):
    record = store.create(make_record())
    record.click_count = 7
    record.last_accessed = record.created_at + timedelta(minutes=5)
    store.update(record)

    fetched = store.select("abc12345")
    assert fetched.click_count == 7
    assert fetched.last_accessed == record.last_accessed
    assert fetched.created_at == record.created_at


def test_update_missing_key_inserts(store):
    store.update(make_record(short_id="fresh"))
    assert store.select("fresh") is not None


def test_ping(store):
    assert store.ping() is True


def test_sql_store_backend_name(sql_store):
    assert sql_store.backend == "sqlite"


def test_redis_store_key_layout(redis_store, fake_redis):
    redis_store.create(make_record(short_id="k1"))
    assert list(fake_redis.data) == ["test:urls:urls:k1"]
    stored = json.loads(fake_redis.data["test:urls:urls:k1"])
    assert stored["short_id"] == "k1"
    assert stored["click_count"] == 0


def test_redis_store_wraps_backend_errors(failing_redis_store):
    with pytest.raises(StoreError):
        failing_redis_store.select("abc")
    with pytest.raises(StoreError):
        failing_redis_store.create(make_record())
    with pytest.raises(StoreError):
        failing_redis_store.update(make_record())
    assert failing_redis_store.ping() is False


def test_redis_store_corrupt_value(redis_store, fake_redis):
    fake_redis.data[redis_store.key("bad")] = "{not json"
    with pytest.raises(StoreError):
        redis_store.select("bad")


def test_sql_store_wraps_backend_errors():
    # Tables are never created, so every query fails
    store = SqlRecordStore(build_engine("sqlite:///:memory:"))
    with pytest.raises(StoreError):
        store.select("abc")
    with pytest.raises(StoreError):
        store.create(make_record())
    store.close()


def test_build_store_picks_sql_backend():
    store = build_store(Settings(DATABASE_URL="sqlite:///:memory:"))
    assert isinstance(store, SqlRecordStore)
    store.close()


def test_build_store_picks_redis_backend():
    store = build_store(Settings(
        DATABASE_URL="redis://localhost:6379/0",
        STORE_NAMESPACE="ns",
        STORE_DATABASE="db",
    ))
    assert isinstance(store, RedisRecordStore)
    assert store.key("x") == "ns:db:urls:x"
    store.close()


def test_build_engine_merges_credentials():
    # create_engine does not connect, so no server is needed
    engine = build_engine("postgresql://db.internal:5432/urls", "user", "secret")
    assert engine.url.username == "user"
    assert engine.url.password == "secret"
    assert engine.url.host == "db.internal"


def test_build_engine_ignores_credentials_for_sqlite():
    engine = build_engine("sqlite:///:memory:", "user", "secret")
    assert engine.url.username is None
    assert engine.url.password is None
    engine.dispose()


def test_build_store_sqlite_with_credentials():
    store = build_store(Settings(
        DATABASE_URL="sqlite:///:memory:",
        DATABASE_USER="user",
        DATABASE_PASSWORD="secret",
    ))
    store.init_schema()
    assert store.ping() is True
    store.close()
