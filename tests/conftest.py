"""Shared test fixtures. Tests run against the in-process mock database."""

import os

os.environ["USE_MOCK_DB"] = "true"
os.environ["JWT_SECRET_KEY"] = "test-signing-key"
os.environ["SEED_TEAMS"] = "T1,T2"

from typing import Dict  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.config.firebase import get_db  # noqa: E402
from app.core.settings import settings  # noqa: E402
from app.models.report import ReportCreate, ReportStatus  # noqa: E402
from app.models.team import TeamAvailability  # noqa: E402
from app.models.user import Principal, Role  # noqa: E402
from app.services.lifecycle import LifecycleCoordinator  # noqa: E402
from app.services.team_store import TeamStore  # noqa: E402
from app.utils.security import init_signing_key  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def signing_key() -> None:
    init_signing_key(
        settings.JWT_SECRET_KEY.get_secret_value(),
        settings.JWT_ALGORITHM,
        settings.JWT_EXPIRE_MINUTES,
    )


@pytest.fixture(autouse=True)
def db():
    """Fresh mock database with teams T1 and T2 for every test."""
    database = get_db()
    database.reset()
    TeamStore(database).ensure(["T1", "T2"])
    yield database
    database.reset()


@pytest.fixture
def client(db) -> TestClient:
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def coordinator(db) -> LifecycleCoordinator:
    return LifecycleCoordinator(db)


@pytest.fixture
def alice() -> Principal:
    return Principal(subject="alice", role=Role.USER)


@pytest.fixture
def worker() -> Principal:
    return Principal(subject="bob", role=Role.WORKER)


@pytest.fixture
def manager() -> Principal:
    return Principal(subject="carol", role=Role.MANAGER)


@pytest.fixture
def pothole() -> ReportCreate:
    return ReportCreate(category="pothole", description="large crack", lat=39.0, lng=35.0)


def auth_headers(client: TestClient, username: str, role: str, password: str = "pw1") -> Dict[str, str]:
    """Register (if needed) and log in; return an Authorization header."""
    client.post("/register", json={"username": username, "password": password, "role": role})
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def snapshot(db) -> Dict:
    """Plain copy of every report and team, for before/after comparisons."""
    return {
        "reports": {d.id: d.to_dict() for d in db.collection("reports").stream()},
        "teams": {d.id: d.to_dict() for d in db.collection("teams").stream()},
    }


def assert_invariants(db) -> None:
    reports = [d.to_dict() for d in db.collection("reports").stream()]
    teams = {d.id: d.to_dict() for d in db.collection("teams").stream()}
    statuses = {s.value for s in ReportStatus}

    for report in reports:
        assert report["status"] in statuses
        has_team = report.get("assigned_team") is not None
        assert has_team == (report["status"] in ("scheduled", "resolved"))

    busy = {r["assigned_team"] for r in reports if r["status"] == "scheduled"}
    for name, team in teams.items():
        assert (team["availability"] == TeamAvailability.WORKING.value) == (name in busy)
