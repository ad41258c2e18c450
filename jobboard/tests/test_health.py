import logging

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from jobboard.auth import get_current_user
from jobboard.database import get_db
from jobboard.main import app


def test_health_ok(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["data"]["status"] == "healthy"
    assert data["data"]["timestamp"]


def test_db_health_ok(client):
    r = client.get("/api/db/health")
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "healthy"


def test_db_health_unhealthy(client):
    class BrokenSession:
        def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def broken_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_db
    r = client.get("/api/db/health")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["data"]["status"] == "unhealthy"


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Not Found"}


def test_security_and_timing_headers(client):
    r = client.get("/api/health")
    assert r.headers["x-frame-options"] == "DENY"
    assert r.headers["x-content-type-options"] == "nosniff"
    assert float(r.headers["x-process-time"]) >= 0


def test_unhandled_errors_are_masked(client, caplog):
    def boom():
        raise RuntimeError("secret internals")

    app.dependency_overrides[get_current_user] = boom
    with TestClient(app, raise_server_exceptions=False) as c:
        with caplog.at_level(logging.ERROR, logger="jobboard.main"):
            r = c.get("/api/auth/me")
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Internal Server Error"}
    assert "secret internals" not in r.text
    assert "unhandled error" in caplog.text


def test_client_error_report_is_logged(client, caplog):
    report = {
        "message": "Cannot read properties of undefined",
        "url": "https://jobs.example.com/dashboard",
        "stack": "TypeError: ...",
        "componentStack": "at JobCard",
        "errorBoundary": "AppBoundary",
        "userAgent": "Mozilla/5.0",
    }
    with caplog.at_level(logging.ERROR, logger="jobboard.main"):
        r = client.post("/api/client-errors", json=report)
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert "Cannot read properties of undefined" in caplog.text


def test_invalid_client_error_report(client):
    r = client.post("/api/client-errors", json={"message": "no url"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Invalid error report format"}

    r = client.post("/api/client-errors", content=b"not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
