import logging

import redis
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from urlshortener.core.config import Settings
from urlshortener.db.redis_store import RedisRecordStore
from urlshortener.db.sql_store import SqlRecordStore
from urlshortener.db.store import RecordStore

logger = logging.getLogger(__name__)

REDIS_SCHEMES = ("redis", "rediss", "unix")


def build_engine(database_url: str, username=None, password=None):
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        # SQLite URLs cannot carry credentials
        if username or password:
            logger.warning("Ignoring DATABASE_USER/DATABASE_PASSWORD for SQLite store")
        kwargs = {"connect_args": {"check_same_thread": False}}
        # every connection to :memory: is a new database, share a single one
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    if username:
        url = url.set(username=username)
    if password:
        url = url.set(password=password)
    return create_engine(url, pool_pre_ping=True)


def build_redis_client(settings: Settings) -> redis.Redis:
    return redis.Redis.from_url(
        settings.DATABASE_URL,
        username=settings.DATABASE_USER,
        password=settings.DATABASE_PASSWORD,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_keepalive=True,
        retry_on_timeout=True,
    )


def build_store(settings: Settings) -> RecordStore:
    """Create the record store selected by the scheme of DATABASE_URL."""
    scheme = settings.DATABASE_URL.split(":", 1)[0].lower()
    if scheme in REDIS_SCHEMES:
        logger.info("Using Redis record store")
        return RedisRecordStore(
            build_redis_client(settings),
            namespace=settings.STORE_NAMESPACE,
            database=settings.STORE_DATABASE,
        )

    engine = build_engine(settings.DATABASE_URL, settings.DATABASE_USER, settings.DATABASE_PASSWORD)
    logger.info("Using SQL record store (%s)", engine.dialect.name)
    return SqlRecordStore(engine)
