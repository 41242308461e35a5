"""
Connection and scoped session tests
"""

from unittest import mock

import mongomock
import pytest

from enrollment_demo import main as demo
from enrollment_demo.db import connection
from enrollment_demo.errors import StoreUnavailable, ValidationError


# ═══════════════════════════════════════════════════════════════════════════
# create_client
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("url", [
    "mongodb://",
    "not-a-mongodb-url",
    "mongodb+srv://no-such-cluster.invalid/",
])
def test_bad_or_unresolvable_url_raises_store_unavailable(url):
    with pytest.raises(StoreUnavailable):
        connection.create_client(url, timeout_ms=200)


def test_main_returns_one_for_malformed_url(monkeypatch):
    monkeypatch.setattr(connection, "MONGO_URL", "mongodb://")

    assert demo.main() == 1


def test_explicit_zero_timeout_is_passed_through(monkeypatch):
    client_factory = mock.MagicMock()
    monkeypatch.setattr(connection, "MongoClient", client_factory)

    connection.create_client("mongodb://localhost:27017/", timeout_ms=0)

    kwargs = client_factory.call_args.kwargs
    assert kwargs["serverSelectionTimeoutMS"] == 0
    assert kwargs["connectTimeoutMS"] == 0
    assert kwargs["socketTimeoutMS"] == 0


def test_timeout_comes_from_environment(monkeypatch):
    client_factory = mock.MagicMock()
    monkeypatch.setattr(connection, "MongoClient", client_factory)
    monkeypatch.setenv("MONGO_TIMEOUT_MS", "1500")

    connection.create_client("mongodb://localhost:27017/")

    assert client_factory.call_args.kwargs["serverSelectionTimeoutMS"] == 1500


def test_timeout_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("MONGO_TIMEOUT_MS", raising=False)

    assert connection.timeout_from_env() == connection.DEFAULT_TIMEOUT_MS


def test_non_numeric_timeout_in_environment_is_rejected(monkeypatch):
    monkeypatch.setenv("MONGO_TIMEOUT_MS", "soon")

    with pytest.raises(ValidationError):
        connection.create_client("mongodb://localhost:27017/")


@pytest.mark.parametrize("timeout_ms", [-1, True, "200"])
def test_invalid_timeout_is_rejected(timeout_ms):
    with pytest.raises(ValidationError):
        connection.create_client("mongodb://localhost:27017/", timeout_ms=timeout_ms)


def test_main_returns_one_for_non_numeric_timeout(monkeypatch):
    monkeypatch.setenv("MONGO_TIMEOUT_MS", "soon")

    assert demo.main() == 1


# ═══════════════════════════════════════════════════════════════════════════
# open_session
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def in_memory_client(monkeypatch):
    monkeypatch.setattr(connection, "create_client", lambda url=None, timeout_ms=None: mongomock.MongoClient())


def test_open_session_closes_client_when_body_raises(in_memory_client):
    with pytest.raises(RuntimeError, match="boom"):
        with connection.open_session() as session:
            session.reset()
            raise RuntimeError("boom")

    assert session._closed is True


def test_open_session_closes_client_on_normal_exit(in_memory_client):
    with connection.open_session(database_name="universityDB_test") as session:
        session.add_student("S1001", "John Doe")
        assert session.database.name == "universityDB_test"

    assert session._closed is True


def test_open_session_uses_configured_database(in_memory_client):
    with connection.open_session() as session:
        assert session.database.name == connection.DATABASE_NAME
