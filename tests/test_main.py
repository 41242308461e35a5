import io
from contextlib import contextmanager

import mongomock
import pytest

from enrollment_demo import main as demo
from enrollment_demo.db.connection import create_client
from enrollment_demo.db.session import CatalogSession
from enrollment_demo.errors import StoreUnavailable


def test_run_demo_shows_stale_embedded_copy(session):
    out = io.StringIO()

    demo.run_demo(session, out)

    text = out.getvalue()
    before, after = text.split("AFTER STUDENT NAME UPDATE:")
    assert "Updated student name: 1 document(s) modified" in before
    for section in (before, after):
        assert "EMBEDDED ENROLLMENT:" in section
        assert "REFERENCED ENROLLMENT:" in section
        assert "Student: S1001 - John Doe" in section
        assert "Student: S1002 - Jane Smith" in section
        assert "Course: MATH201 - Calculus (4 credits)" in section
    assert "Johnathan" not in text
    assert session.find_student("S1001").name == "Johnathan Doe"


def test_run_demo_can_run_twice(session):
    demo.run_demo(session, io.StringIO())
    demo.run_demo(session, io.StringIO())

    assert session.counts() == {"students": 2, "courses": 2, "enrollments": 2}


def test_main_returns_zero_on_success(monkeypatch, capsys):
    @contextmanager
    def in_memory_session():
        with CatalogSession(mongomock.MongoClient(), "universityDB_test") as session:
            yield session

    monkeypatch.setattr(demo, "open_session", in_memory_session)

    assert demo.main() == 0
    assert capsys.readouterr().out.startswith("ALL ENROLLMENTS:")


def test_main_returns_one_when_store_is_unavailable(monkeypatch):
    def unavailable():
        raise StoreUnavailable("MongoDB at mongodb://nowhere is unavailable")

    monkeypatch.setattr(demo, "open_session", unavailable)

    assert demo.main() == 1


def test_unreachable_server_raises_store_unavailable():
    with pytest.raises(StoreUnavailable):
        create_client("mongodb://127.0.0.1:1/", timeout_ms=200)
