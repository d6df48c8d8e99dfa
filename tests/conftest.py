from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from taskhub.adapters.publisher_memory import InMemoryPublisher
from taskhub.adapters.task_repository_sql import SqlTaskRepository
from taskhub.app.db import Base, get_db, init_db


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session of one test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture()
def session(session_factory) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def repo(session) -> SqlTaskRepository:
    return SqlTaskRepository(session)


@pytest.fixture()
def publisher() -> InMemoryPublisher:
    return InMemoryPublisher()


@pytest.fixture()
def client(session_factory, publisher):
    from taskhub.app.deps import get_publisher
    from taskhub.app.main import app

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_publisher] = lambda: publisher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
