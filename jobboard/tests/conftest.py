import os
import tempfile
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# Ensure tests always use SQLite and cheap bcrypt rounds
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_jobboard.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from jobboard.database import Base, get_db
from jobboard.main import app

PASSWORD = "password123"


@pytest.fixture(scope="session")
def test_db_url():
    # Use a temporary SQLite file to persist across tests within a session
    db_fd, db_path = tempfile.mkstemp(prefix="test_jobboard_", suffix=".db")
    os.close(db_fd)
    url = f"sqlite:///{db_path}"
    yield url
    try:
        os.remove(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture()
def db_session(test_db_url):
    engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    # Create all tables
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
    # Ensure file handles are released on Windows
    engine.dispose()


@pytest.fixture()
def client(db_session):
    # Override the dependency to use the test session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    if app.state.rate_limiter is not None:
        app.state.rate_limiter.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register(client):
    """Register a user over HTTP; returns ``(user_json, auth_headers)``."""

    def _register(email, role="job_seeker", password=PASSWORD, **extra):
        resp = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "role": role, **extra},
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return data["user"], bearer(data["token"])

    return _register


@pytest.fixture()
def seeker(register):
    return register("seeker@example.com", displayName="Sam Seeker")


@pytest.fixture()
def recruiter(register):
    return register("recruiter@example.com", role="recruiter", displayName="Rita Recruiter")


@pytest.fixture()
def company(client, recruiter):
    _, headers = recruiter
    resp = client.post(
        "/api/company",
        json={"name": "Tech Corp", "description": "Cloud things", "location": "San Francisco, CA"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def job_payload(**overrides):
    payload = {
        "title": "Backend Engineer",
        "description": "Build APIs",
        "requirements": "Python",
        "location": "Remote",
        "jobType": "full-time",
        "experienceLevel": "mid",
        "salaryMin": 90000,
        "salaryMax": 130000,
        "skills": ["Python", "SQL"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def post_job(client, recruiter, company):
    _, headers = recruiter

    def _post(**overrides):
        resp = client.post("/api/jobs", json=job_payload(**overrides), headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _post
