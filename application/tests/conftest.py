import os

# Settings are read at import time; point the app at an in-memory database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["DEBUG"] = "true"
os.environ["SENTRY_ENABLED"] = "false"
os.environ["AUDIT_LOGGING_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coupon_service.connections.database import Base, get_db
from coupon_service.main import app
from coupon_service.models import coupons  # noqa: F401


@pytest.fixture
def engine():
    """In-memory SQLite DB for fast testing."""
    _engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(_engine)
    yield _engine
    Base.metadata.drop_all(_engine)


@pytest.fixture
def db_session(engine):
    TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    s = TestSession()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(engine):
    """TestClient whose get_db dependency is bound to the in-memory engine."""
    TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        s = TestSession()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def scenario_cart():
    return [
        {"product_id": 1, "quantity": 2, "price": 50},
        {"product_id": 2, "quantity": 1, "price": 30},
    ]


@pytest.fixture
def bxgy_cart():
    return [
        {"product_id": 1, "quantity": 6, "price": 50},
        {"product_id": 2, "quantity": 3, "price": 30},
        {"product_id": 3, "quantity": 2, "price": 25},
    ]
