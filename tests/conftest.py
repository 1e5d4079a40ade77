import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("AUTO_CREATE_DB", "false")

import pytest
from sqlalchemy import create_engine, event, StaticPool
from sqlalchemy.orm import sessionmaker

from workflowpro.database import Base, enable_sqlite_foreign_keys, get_db
from workflowpro.main import app

from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory SQLite engine for each test.
    Uses StaticPool so all threads share the same connection."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a session bound to the test engine."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine, db_session):
    """FastAPI test client with overridden DB dependency."""
    def _override_get_db():
        session = sessionmaker(bind=db_engine)()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
