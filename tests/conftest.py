"""Shared fixtures: in-memory SQLite per test, FastAPI client, one owner with a specialist."""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base, configure_sqlite, get_db
from app.db.models import Appointment, Specialist, User
from app.main import app


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    """Test client whose requests use the in-memory database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner(session_factory):
    """(user_id, specialist_id) of a user owning one beauty page."""
    with session_factory() as db:
        user = User(email="anna@example.com", name="Anna")
        db.add(user)
        db.flush()
        specialist = Specialist(user_id=user.id, username="anna-nails", display_name="Anna Nails")
        db.add(specialist)
        db.commit()
        return user.id, specialist.id


@pytest.fixture
def stranger(session_factory):
    """user_id of someone who owns nothing."""
    with session_factory() as db:
        user = User(email="bob@example.com", name="Bob")
        db.add(user)
        db.commit()
        return user.id


@pytest.fixture
def auth(owner):
    user_id, specialist_id = owner
    return {"X-User-Id": str(user_id)}, specialist_id


@pytest.fixture
def add_appointment(session_factory, owner):
    """Insert an appointment for the owner's specialist."""

    def _add(day: date, start: str, end: str, status: str = "confirmed", client_name: str = "Client"):
        with session_factory() as db:
            apt = Appointment(
                specialist_id=owner[1],
                client_name=client_name,
                date=day,
                start_time=f"{start}:00",
                end_time=f"{end}:00",
                status=status,
            )
            db.add(apt)
            db.commit()
            return apt.id

    return _add
