"""Pytest fixtures: a fresh SQLite database file per test."""
import os
import uuid as uuid_lib
import logging
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# Quiet SQLAlchemy
logging.getLogger('sqlalchemy').setLevel(logging.ERROR)
logging.getLogger('sqlalchemy.engine').setLevel(logging.ERROR)

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "30")

from flashstudy.main import app
from flashstudy.core.clock import utc_now
from flashstudy.core.security import hash_password
from flashstudy.db.base import Base
from flashstudy.db.session import build_engine, get_db, init_db
from flashstudy.models.user import User
from flashstudy.services.deck_store import DeckStore
from flashstudy.services.flashcard_store import FlashcardStore

PASSWORD = "password123"


@pytest.fixture(scope="function")
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'flashstudy.db'}")
    init_db(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture(scope="function")
def db(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture(scope="function")
def client(session_factory) -> TestClient:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, prefix: str) -> User:
    user = User(
        username=prefix,
        email=f"{prefix}_{uuid_lib.uuid4().hex[:8]}@studymail.com",
        password_hash=hash_password(PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db) -> User:
    return _make_user(db, "testuser")


@pytest.fixture(scope="function")
def other_user(db) -> User:
    return _make_user(db, "other")


def _login(client: TestClient, user: User) -> dict:
    response = client.post(
        "/api/auth/login",
        json={"email": user.email, "password": PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(scope="function")
def auth_headers(client: TestClient, test_user: User) -> dict:
    return _login(client, test_user)


@pytest.fixture(scope="function")
def other_headers(client: TestClient, other_user: User) -> dict:
    return _login(client, other_user)


@pytest.fixture(scope="function")
def make_deck(db):
    """Factory: deck owned by `owner` with `cards` flashcards created oldest first."""
    def _make(owner: User, name: str = "Deck", cards: int = 0, *, is_public: bool = False,
              random_order: bool = False, category: str = "General"):
        deck = DeckStore(db).create(
            owner_id=owner.id,
            name=name,
            category=category,
            is_public=is_public,
            settings={"random_order": random_order},
        )
        store = FlashcardStore(db)
        created = utc_now() - timedelta(hours=1)
        for i in range(cards):
            card = store.create(
                deck_id=deck.id,
                owner_id=owner.id,
                question=f"{name} question {i + 1}",
                answer=f"{name} answer {i + 1}",
            )
            # distinct timestamps make creation order deterministic
            card.created_at = created + timedelta(seconds=i)
        db.commit()
        db.refresh(deck)
        return deck

    return _make


@pytest.fixture(scope="function")
def math_deck(make_deck, test_user):
    return make_deck(test_user, "Math", cards=4, category="Mathematics")
