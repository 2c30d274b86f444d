"""Shared fixtures.

Settings require ``DATABASE_PASSWORD`` and ``SECRET_KEY``; they are set
here before any application module is imported.  Service tests run
against an in-memory SQLite database created fresh for every test.
"""

import os

os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.db.base  # noqa: F401,E402
from app.models.coach_client import CoachClientRelationship  # noqa: E402
from app.models.user import User  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={ "check_same_thread": False }, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(session):
    counter = { "n": 0 }

    def _make(is_coach: bool = False, email: str | None = None) -> User:
        counter["n"] += 1
        user = User(email=email or f"user{counter['n']}@example.com", hashed_password="not-a-real-hash",
                    is_coach=is_coach)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def coach(make_user) -> User:
    return make_user(is_coach=True)


@pytest.fixture
def client_user(make_user, session, coach) -> User:
    """A client with an active relationship to ``coach``."""
    client = make_user()
    session.add(CoachClientRelationship(coach_id=coach.id, client_id=client.id))
    session.commit()
    return client
