"""Shared fixtures: a throwaway SQLite database rebuilt for every test."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Settings are read at import time, so point them at the test database first
_DB_DIR = tempfile.mkdtemp(prefix="campus-gate-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["GATE_AUTO_CLOSE_SECONDS"] = "0.2"
os.environ["LOG_FILE"] = ""
os.environ.pop("API_KEY", None)

from datetime import timedelta

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.database import SessionLocal, create_tables, drop_tables
from app.services.gate_controller import GateController
from app.services.repository import EntityRepository
from app.utils.clock import utcnow

AUTO_CLOSE = 0.2


@pytest.fixture(autouse=True)
def clean_db():
    drop_tables()
    create_tables()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def repo(db):
    return EntityRepository(db)


@pytest_asyncio.fixture
async def controller():
    gate_controller = GateController(SessionLocal, auto_close_seconds=AUTO_CLOSE)
    yield gate_controller
    gate_controller.shutdown()


@pytest.fixture
def client():
    from app.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(repo):
    def _make(username="student", role="student_staff"):
        return repo.create("user", {
            "username": username,
            "password": "password",
            "role": role,
            "full_name": f"{username.title()} User",
            "email": f"{username}@campus.edu",
        })
    return _make


@pytest.fixture
def make_vehicle(repo, make_user):
    def _make(plate="ABC-123", owner=None, is_active=True):
        owner = owner or repo.get_user_by_username("student") or make_user()
        return repo.create("vehicle", {
            "user_id": owner.id,
            "license_plate": plate,
            "make": "Toyota",
            "model": "Corolla",
            "color": "Silver",
            "is_active": is_active,
        })
    return _make


@pytest.fixture
def make_gate(repo):
    def _make(name="Main Gate", status="online"):
        return repo.create("gate", {"name": name, "location": "North Entrance", "status": status})
    return _make


@pytest.fixture
def make_visitor(repo):
    def _make(valid_from=None, valid_until=None, is_active=True, email="guest@example.com"):
        now = utcnow()
        return repo.create("visitor", {
            "full_name": "Grace Guest",
            "email": email,
            "phone_number": "+2340000000000",
            "purpose": "Guest lecture",
            "host_name": "Dr. Host",
            "host_contact": "host@campus.edu",
            "valid_from": valid_from or now - timedelta(hours=1),
            "valid_until": valid_until or now + timedelta(hours=1),
            "is_active": is_active,
        })
    return _make


def refetch_gate(db, gate_id):
    """Read the gate as another session last committed it."""
    db.expire_all()
    return EntityRepository(db).get("gate", gate_id)


@pytest.fixture
def gate_state(db):
    return lambda gate_id: refetch_gate(db, gate_id)
