"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cartify.models.user import Base, UserAccount, get_db
import cartify.models.address  # noqa: F401  register Address model
from cartify.main import app
from cartify.services.address_manager import AddressConsistencyManager
from cartify.utils.address_store import AddressStore


@pytest.fixture
def engine():
    """In-memory SQLite database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def manager(session):
    return AddressConsistencyManager(AddressStore(session))


@pytest.fixture
def make_user(session):
    """Create and return a persisted user account."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        user = UserAccount(
            email=overrides.pop("email", f"user{n}@example.com"),
            username=overrides.pop("username", f"user{n}"),
            **overrides,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


BAKER_STREET = {
    "address_line1": "221B Baker St",
    "city": "London",
    "state": "Greater London",
    "postal_code": "NW1",
}


@pytest.fixture
def address_fields():
    """Factory for a valid address field dict with optional overrides."""
    def _fields(**overrides):
        fields = dict(BAKER_STREET)
        fields.update(overrides)
        return fields

    return _fields
