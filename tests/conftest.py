# tests/conftest.py
import os
import sys
from datetime import datetime, timezone

import pytest

# чтобы import create_app работал при запуске из корня
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from extensions import db

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret",
        "GEMINI_API_KEY": "",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    """App-wide store pinned to a fixed clock."""
    store = app.extensions["inventory_store"]
    store.clock = lambda: NOW
    return store


@pytest.fixture()
def now():
    return NOW
