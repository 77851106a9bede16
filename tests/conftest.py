from __future__ import annotations

import pytest

from ssq import create_app
from ssq.db import create_app_engine, create_session_factory, session_scope
from ssq.models.base import Base
from ssq.models.draw_record import DrawRecord
from ssq.repositories.history_repository import HistoryRepository


@pytest.fixture
def engine():
    engine = create_app_engine("sqlite://")
    from ssq import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = create_session_factory(engine)
    s = factory()
    yield s
    s.close()


@pytest.fixture
def repo() -> HistoryRepository:
    return HistoryRepository()


@pytest.fixture
def app():
    return create_app(
        {
            "TESTING": True,
            "DATABASE_URL": "sqlite://",
            "INGEST_TOKEN": None,
            "GENERATION_MAX_ATTEMPTS": 1000,
            "FETCH_DELAY_MIN": 0.0,
            "FETCH_DELAY_MAX": 0.0,
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed_history(app):
    """Insert draws into the app's database outside any request."""

    def _seed(*records: DrawRecord) -> None:
        repo = HistoryRepository()
        with session_scope(app.extensions["session_factory"]) as s:
            for record in records:
                repo.insert(s, record)

    return _seed
