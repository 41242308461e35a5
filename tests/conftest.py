import mongomock
import pytest

from enrollment_demo.db.session import CatalogSession


@pytest.fixture
def session():
    """A reset catalog session backed by an in-memory MongoDB"""
    catalog = CatalogSession(mongomock.MongoClient(), "universityDB_test")
    catalog.reset()
    yield catalog
    catalog.close()
