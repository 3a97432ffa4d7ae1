"""Shared fixtures: an app wired to an in-memory document store."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import DocumentStore
from main import create_app
from tests.fake_mongo import FakeDatabase


LESSONS = [
    {"title": "Math", "description": "Algebra basics", "location": "London", "price": 100, "availableInventory": 5},
    {"title": "English", "description": "Category: languages", "location": "Oxford", "price": 80, "availableInventory": 3},
    {"title": "Music", "description": "Piano for beginners", "location": "Hendon", "price": 95.5, "availableInventory": 0},
    {"title": "Art", "description": "Painting", "location": "Colindale", "price": 70, "availableInventory": 12},
]


@pytest.fixture
def settings():
    return Settings(_env_file=None, database_name="test", log_level="DEBUG")


@pytest.fixture
def fake_db():
    return FakeDatabase("test")


@pytest.fixture
def store(fake_db, settings):
    store = DocumentStore("mongodb://test", "test", settings.users_collection)
    store.db = fake_db
    store._ensure_indexes(fake_db)
    return store


@pytest.fixture
def client(settings, store):
    """Test client for an app whose store is already connected."""
    app = create_app(settings=settings, store=store)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def lessons(fake_db, settings):
    collection = fake_db[settings.lessons_collection]
    for lesson in LESSONS:
        collection.insert_one(dict(lesson))
    return collection
