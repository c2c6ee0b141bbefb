"""Pytest fixtures — SQLite database per test, authenticated clients, captured email."""
from datetime import datetime, timezone, timedelta
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from ensemble.database import Base, get_db
from ensemble.main import app
from ensemble.models.role import Role
from ensemble.models.user import User
from ensemble.seed import seed_admin
from ensemble.services import auth_service, notification_service

# Import all models so they register with Base.metadata
import ensemble.models  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"
MEMBER_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing email instead of talking to SMTP."""
    outbox = []

    def _fake_send(to, subject, html):
        outbox.append({"to": list(to), "subject": subject, "html": html})
        return True

    monkeypatch.setattr(notification_service, "send_email", _fake_send)
    return outbox


@pytest.fixture
def admin(db):
    return seed_admin(db, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def admin_headers(client, admin):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def member(db):
    return create_db_user(db, name="Alice", email="alice@example.com")


@pytest.fixture
def member_headers(client, member):
    return login(client, member.email, MEMBER_PASSWORD)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def create_db_user(db, name: str = "Test User", email: str = "user@example.com",
                   password: str = MEMBER_PASSWORD, roles: list = None,
                   must_change_password: bool = False, instrument: str = None) -> User:
    """Helper — insert a user directly, bypassing the API."""
    user = User(
        name=name,
        email=email,
        password_hash=auth_service.hash_password(password),
        instrument=instrument,
        must_change_password=must_change_password,
        roles=roles or [],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_db_role(db, name: str, permissions: list[str]) -> Role:
    """Helper — insert a role directly, bypassing the API."""
    role = Role(name=name)
    role.permission_list = permissions
    db.add(role)
    db.commit()
    db.refresh(role)
    return role


def login(client: TestClient, email: str, password: str) -> dict:
    """Helper — log in and return Authorization headers.

    The session cookie is dropped so each request is authenticated only by
    the headers passed to it.
    """
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def create_test_event(client: TestClient, headers: dict, title: str = "Concert",
                      days_ahead: int = 7, **extra) -> dict:
    """Helper — POST /api/events and return response JSON."""
    date = datetime.now(timezone.utc) + timedelta(days=days_ahead)
    resp = client.post("/api/events/", headers=headers, json={
        "title": title,
        "date": date.isoformat(),
        "location": "Town Hall",
        **extra,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
