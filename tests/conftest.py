# tests/conftest.py

"""Shared fixtures: an in-memory store, settings and an API test client."""

import pytest
from fastapi.testclient import TestClient

from framedeck.core.app_factory import create_app
from framedeck.core.schemas import DemoRecord, FrameRecord
from framedeck.core.settings import DatabaseConfig, load_settings
from framedeck.core.storage import FrameStore


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Keep a developer's .env file out of the tests."""
    monkeypatch.setattr("framedeck.core.settings.load_dotenv", lambda **kwargs: False)


@pytest.fixture
def store():
    store = FrameStore.from_config(DatabaseConfig(url="sqlite://"))
    store.sync_schema()
    yield store
    store.dispose()


@pytest.fixture
def settings():
    return load_settings(database_url="sqlite://", debug=False)


@pytest.fixture
def app(settings, store):
    return create_app(settings, store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def intro_demo(store):
    """Demo whose frames are stored out of order."""
    return store.create_demo("Intro", [(2, "<b>2</b>"), (1, "<b>1</b>")])


@pytest.fixture
def intro_record():
    return DemoRecord(
        id="d1",
        name="Intro",
        frames=(
            FrameRecord(id="f2", order=2, html="<b>2</b>"),
            FrameRecord(id="f1", order=1, html="<b>1</b>"),
        ),
    )
