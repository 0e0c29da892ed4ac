"""Pytest fixtures: file-backed SQLite database, rebuilt for every test."""
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from event_platform.auth import IdentityProvider, get_identity_provider
from event_platform.database import Base, get_db
from event_platform.errors import Unauthenticated
from event_platform.main import app

# Import all models so they register with Base.metadata
from event_platform.models.user import User                                # noqa: F401
from event_platform.models.organization import Organization, OrgMember     # noqa: F401
from event_platform.models.event import Event                              # noqa: F401
from event_platform.models.ticket_tier import TicketTier                   # noqa: F401
from event_platform.models.payout_account import PayoutAccount             # noqa: F401
from event_platform.models.event_template import EventTemplate             # noqa: F401
from event_platform.models.event_draft import EventDraft                   # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
TOKEN_PREFIX = "token-"


class FakeIdentityProvider(IdentityProvider):
    """Accepts ``token-<user_id>`` and nothing else."""

    def __init__(self):
        super().__init__(client=None)

    def resolve(self, token: str) -> str:
        if not token.startswith(TOKEN_PREFIX) or len(token) == len(TOKEN_PREFIX):
            raise Unauthenticated("Invalid token")
        return token[len(TOKEN_PREFIX):]


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

    Base.metadata.drop_all(bind=engine)
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
    """FastAPI TestClient with the database and identity provider overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_identity_provider] = FakeIdentityProvider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {TOKEN_PREFIX}{user_id}"}


def create_test_user(client: TestClient, name: str = "Test User") -> dict:
    """Helper: POST /api/users/me as a brand-new identity and return response JSON."""
    user_id = str(uuid.uuid4())
    resp = client.post("/api/users/me", json={"display_name": name}, headers=auth_headers(user_id))
    assert resp.status_code == 200, resp.text
    return resp.json()


def create_test_org(client: TestClient, owner_id: str, name: str = "Test Org", slug: str = None) -> dict:
    """Helper: POST /api/orgs as owner_id and return response JSON."""
    slug = slug or f"org-{uuid.uuid4().hex[:8]}"
    resp = client.post("/api/orgs/", json={"name": name, "slug": slug}, headers=auth_headers(owner_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_org_member(client: TestClient, org_id: str, by_user_id: str, user_id: str, role: str = "member") -> dict:
    """Helper: POST /api/orgs/{id}/members as by_user_id."""
    resp = client.post(
        f"/api/orgs/{org_id}/members",
        json={"user_id": user_id, "role": role},
        headers=auth_headers(by_user_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
