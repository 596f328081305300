import os

os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_goldsim.db")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401  registers every table on Base.metadata
from app import app
from database import Base, get_db
from services.email_verification_service import VerificationCodeStore, get_email_verification_store

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite:///./test_goldsim.db")
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Cheap bcrypt rounds keep the suite fast; the algorithm is unchanged
fast_hasher = CryptContext(schemes=["bcrypt"], bcrypt__rounds=4)


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class Outbox:
    """Collects sent mail instead of talking to SMTP."""

    def __init__(self):
        self.messages = []

    def __call__(self, to, subject, body):
        self.messages.append({"to": to, "subject": subject, "body": body})

    def last_code(self):
        # Body reads "Verification code: 123456 (enter within 3 minutes)"
        return self.messages[-1]["body"].split(":", 1)[1].strip()[:6]


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def store(outbox, clock):
    return VerificationCodeStore(mail_sender=outbox, hasher=fast_hasher, clock=clock)


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    import utils.password_hasher as password_hasher
    monkeypatch.setattr(password_hasher, "pwd_context", fast_hasher)


@pytest.fixture
def client(db, store):
    def override_get_db():
        try:
            yield db
        finally:
            db.close()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_verification_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def hasher():
    return fast_hasher
