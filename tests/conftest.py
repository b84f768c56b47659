"""Shared fixtures: stores and API clients over temporary SQLite files."""

import pytest
from fastapi.testclient import TestClient

from composition_store.app.core.config import Settings
from composition_store.app.core.db import Database, init_db
from composition_store.app.core.identity import OpaqueCodePolicy, SequentialIdPolicy
from composition_store.app.main import create_app
from composition_store.app.services.composition_service import CompositionStore


@pytest.fixture
def database(tmp_path):
    return Database(str(tmp_path / "compositions.db"))


@pytest.fixture
def sequential_store(database):
    store = CompositionStore(database, SequentialIdPolicy())
    init_db(store.database, store.strategy)
    return store


@pytest.fixture
def code_store(database):
    store = CompositionStore(database, OpaqueCodePolicy())
    init_db(store.database, store.strategy)
    return store


def make_settings(tmp_path, **overrides) -> Settings:
    values = {"database_url": str(tmp_path / "api.db"), "identity_strategy": "sequential"}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def sequential_client(tmp_path):
    app = create_app(make_settings(tmp_path))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def code_client(tmp_path):
    app = create_app(make_settings(tmp_path, identity_strategy="code"))
    with TestClient(app) as client:
        yield client
