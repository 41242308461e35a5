import os
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from ..errors import StoreUnavailable, ValidationError
from .session import CatalogSession

# Configure logging
logger = logging.getLogger(__name__)

load_dotenv()

# MongoDB configuration from environment variables
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017/")
DATABASE_NAME = os.getenv("MONGO_DATABASE", "universityDB")
DEFAULT_TIMEOUT_MS = 5000


def timeout_from_env() -> int:
    """Read MONGO_TIMEOUT_MS, falling back to DEFAULT_TIMEOUT_MS when unset"""
    raw = os.getenv("MONGO_TIMEOUT_MS")
    if raw is None:
        return DEFAULT_TIMEOUT_MS
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"MONGO_TIMEOUT_MS must be an integer, got {raw!r}") from None


def create_client(url: Optional[str] = None, timeout_ms: Optional[int] = None) -> MongoClient:
    """Create a MongoDB client and make sure the server answers a ping"""
    if url is None:
        url = MONGO_URL
    if timeout_ms is None:
        timeout_ms = timeout_from_env()
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms < 0:
        raise ValidationError(f"Timeout must be a non-negative number of milliseconds, got {timeout_ms!r}")

    logger.info(f"Connecting to MongoDB: {url}")
    client = None
    try:
        client = MongoClient(
            url,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
        )

        # Test the connection
        client.admin.command('ping')
        logger.info("✅ MongoDB connection successful")
    except PyMongoError as e:
        logger.error(f"❌ MongoDB connection failed: {e}")
        if client is not None:
            client.close()
        raise StoreUnavailable(f"MongoDB at {url} is unavailable: {e}") from e

    return client


@contextmanager
def open_session(
    url: Optional[str] = None,
    database_name: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> Iterator[CatalogSession]:
    """Yield a CatalogSession whose client is closed on every exit path"""
    client = create_client(url, timeout_ms)
    if database_name is None:
        database_name = DATABASE_NAME
    session = CatalogSession(client, database_name)
    try:
        yield session
    finally:
        session.close()
