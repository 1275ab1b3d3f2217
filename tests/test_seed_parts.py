"""seed_parts.py against a throwaway SQLite file."""

import pytest

import seed_parts
from app import create_app
from config import Config


@pytest.fixture()
def db_uri(tmp_path, monkeypatch):
    uri = f"sqlite:///{tmp_path / 'parts.db'}"
    monkeypatch.setattr(Config, "SQLALCHEMY_DATABASE_URI", uri)
    return uri


def test_list_on_fresh_db_writes_nothing(db_uri, capsys):
    seed_parts.main(["--list"])
    assert "Total: 0" in capsys.readouterr().out

    app = create_app({"TESTING": True})
    with app.app_context():
        assert len(app.extensions["inventory_store"].list()) == 5


def test_create_then_list(db_uri, capsys):
    seed_parts.main(["--create"])
    seed_parts.main(["--list"])
    assert "Total: 5" in capsys.readouterr().out
