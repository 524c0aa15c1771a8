"""
Shared fixtures: an in-memory Mongo database seeded with the lesson catalog
and a TestClient wired to it.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import LessonStore, OrderStore
from main import create_app
from seed import seed_lessons


@pytest.fixture
def db():
    """Fresh mongomock database per test."""
    return mongomock.MongoClient()["lesson_app"]


@pytest.fixture
def lesson_store(db):
    store = LessonStore(db)
    seed_lessons(store)
    return store


@pytest.fixture
def order_store(db):
    return OrderStore(db)


@pytest.fixture
def images_dir(tmp_path):
    path = tmp_path / "images"
    path.mkdir()
    (path / "maths.png").write_bytes(b"\x89PNG\r\n\x1a\nfake-image")
    return path


@pytest.fixture
def app(db, lesson_store, images_dir):
    return create_app(database=db, images_dir=images_dir)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
