"""Shared helpers for API tests: an in-memory SQLite database wired into the app, plus auth helpers."""

import unittest
from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from movie_catalog.core import security
from movie_catalog.core.database import get_db
from movie_catalog.main import app
from movie_catalog.models import Base, Movie, User

# Minimum bcrypt cost keeps the suite fast; hashing behaviour is otherwise identical.
security.BCRYPT_ROUNDS = 4

DEFAULT_PASSWORD = "correct-horse-battery"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with all tables; one shared connection so every session sees it."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    email: str = "user@example.com",
    role: str = "user",
    password: str = DEFAULT_PASSWORD,
    name: str = "Test User",
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=security.hash_password(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_movie(db: Session, title: str = "Heat", **fields: object) -> Movie:
    movie = Movie(title=title, **fields)
    db.add(movie)
    db.commit()
    db.refresh(movie)
    return movie


def bearer(
    user_id: int,
    role: str,
    issued_at: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> dict[str, str]:
    token = security.create_access_token(
        sub=user_id, role=role, issued_at=issued_at, expires_delta=expires_delta
    )
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """Runs the real app against a per-test SQLite database via a get_db override."""

    def setUp(self) -> None:
        self.SessionLocal = make_session_factory()

        def _get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _get_db
        self.client = TestClient(app)
        self.db = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        app.dependency_overrides.clear()

    def admin_headers(self) -> dict[str, str]:
        return bearer(1, "admin")

    def user_headers(self) -> dict[str, str]:
        return bearer(2, "user")

    def movie_count(self) -> int:
        self.db.expire_all()
        return self.db.query(Movie).count()
