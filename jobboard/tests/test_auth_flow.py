import hashlib

from jobboard import crud
from jobboard.config import settings
from jobboard.models import User
from jobboard.token import verify_token


def register_user(client, email="user@example.com", password="password123", **extra):
    return client.post("/api/auth/register", json={"email": email, "password": password, **extra})


def login_user(client, email="user@example.com", password="password123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_register_then_login_and_me(client):
    # Register
    r = register_user(client, email="User@Example.com", displayName="User One")
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["email"] == "user@example.com"
    assert user["displayName"] == "User One"
    assert user["role"] == "job_seeker"
    assert "passwordHash" not in user

    # Duplicate register should 400
    r2 = register_user(client)
    assert r2.status_code == 400
    assert r2.json() == {"success": False, "error": "Email already registered"}

    # Login
    r3 = login_user(client)
    assert r3.status_code == 200, r3.text
    token = r3.json()["data"]["token"]
    assert token

    # Access /me
    r4 = client.get("/api/auth/me", headers=auth(token))
    assert r4.status_code == 200, r4.text
    me = r4.json()["data"]
    assert me["email"] == "user@example.com"


def test_register_validation_errors_are_400(client):
    r = register_user(client, password="short")
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert "password" in body["error"]

    r = register_user(client, email="not-an-email")
    assert r.status_code == 400


def test_register_rejects_taken_username(client):
    assert register_user(client, email="a@example.com", username="sam").status_code == 201
    r = register_user(client, email="b@example.com", username="SAM")
    assert r.status_code == 400
    assert r.json()["error"] == "Username already taken"


def test_login_failures(client):
    register_user(client)
    r = login_user(client, password="wrong-password")
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid email or password"

    r = login_user(client, email="nobody@example.com")
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid email or password"


def test_me_requires_a_valid_token(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
    assert r.json()["error"] == "Could not validate credentials"

    r = client.get("/api/auth/me", headers=auth("garbage"))
    assert r.status_code == 401


def test_token_accepted_from_cookie(client):
    token = register_user(client).json()["data"]["token"]
    r = client.get("/api/auth/me", headers={"Cookie": f"access_token=Bearer {token}"})
    assert r.status_code == 200, r.text


def test_logout_revokes_current_session(client):
    token = register_user(client).json()["data"]["token"]
    other = login_user(client).json()["data"]["token"]

    r = client.post("/api/auth/logout", headers=auth(token))
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out"

    assert client.get("/api/auth/me", headers=auth(token)).status_code == 401
    assert client.get("/api/auth/me", headers=auth(other)).status_code == 200


def test_logout_all_revokes_every_session(client):
    first = register_user(client).json()["data"]["token"]
    second = login_user(client).json()["data"]["token"]

    r = client.post("/api/auth/logout-all", headers=auth(first))
    assert r.status_code == 200
    assert r.json()["data"] == {"revoked": 2}
    assert client.get("/api/auth/me", headers=auth(first)).status_code == 401
    assert client.get("/api/auth/me", headers=auth(second)).status_code == 401


def test_list_sessions(client):
    token = register_user(client).json()["data"]["token"]
    login_user(client)

    r = client.get("/api/auth/sessions", headers=auth(token))
    assert r.status_code == 200
    sessions = r.json()["data"]
    assert len(sessions) == 2
    assert {"id", "userAgent", "ipAddress", "createdAt", "expiresAt"} <= set(sessions[0])


def test_lockout_after_repeated_failures(client, db_session):
    register_user(client)
    for _ in range(settings.MAX_FAILED_LOGINS):
        assert login_user(client, password="wrong-password").status_code == 401

    r = login_user(client)
    assert r.status_code == 401
    assert r.json()["error"] == "Account is temporarily locked"

    user = db_session.query(User).filter(User.email == "user@example.com").one()
    assert user.failed_login_attempts == settings.MAX_FAILED_LOGINS
    assert user.locked_until is not None


def test_successful_login_resets_failure_counter(client, db_session):
    register_user(client)
    login_user(client, password="wrong-password")
    assert login_user(client).status_code == 200

    user = db_session.query(User).filter(User.email == "user@example.com").one()
    assert user.failed_login_attempts == 0
    assert user.last_active_at is not None


def test_deactivated_account_cannot_log_in(client, db_session):
    register_user(client)
    user = db_session.query(User).filter(User.email == "user@example.com").one()
    user.is_active = False
    db_session.commit()

    r = login_user(client)
    assert r.status_code == 401
    assert r.json()["error"] == "Account is deactivated"


def test_legacy_digest_is_upgraded_on_login(client, db_session):
    register_user(client)
    user = db_session.query(User).filter(User.email == "user@example.com").one()
    user.password_hash = hashlib.sha256(b"password123").hexdigest()
    db_session.commit()

    assert login_user(client).status_code == 200
    db_session.refresh(user)
    assert user.password_hash.startswith("$2")


def test_update_me(client):
    token = register_user(client).json()["data"]["token"]
    register_user(client, email="other@example.com", username="taken")

    r = client.put(
        "/api/auth/me",
        json={"displayName": "New Name", "theme": "dark", "preferences": {"lang": "en"}},
        headers=auth(token),
    )
    assert r.status_code == 200, r.text
    me = r.json()["data"]
    assert me["displayName"] == "New Name"
    assert me["theme"] == "dark"
    assert me["preferences"] == {"lang": "en"}

    r = client.put("/api/auth/me", json={"username": "Taken"}, headers=auth(token))
    assert r.status_code == 400
    assert r.json()["error"] == "Username already taken"


def test_change_password_signs_out_other_sessions(client):
    current = register_user(client).json()["data"]["token"]
    other = login_user(client).json()["data"]["token"]

    r = client.put(
        "/api/auth/password",
        json={"currentPassword": "nope-nope", "newPassword": "brand-new-pass"},
        headers=auth(current),
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Current password is incorrect"

    r = client.put(
        "/api/auth/password",
        json={"currentPassword": "password123", "newPassword": "brand-new-pass"},
        headers=auth(current),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"revoked": 1}

    assert client.get("/api/auth/me", headers=auth(current)).status_code == 200
    assert client.get("/api/auth/me", headers=auth(other)).status_code == 401
    assert login_user(client).status_code == 401
    assert login_user(client, password="brand-new-pass").status_code == 200


def test_stateless_tokens(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_SESSIONS", False)

    token = register_user(client).json()["data"]["token"]
    assert "sid" not in verify_token(token)

    assert client.get("/api/auth/me", headers=auth(token)).status_code == 200
    assert client.get("/api/auth/sessions", headers=auth(token)).json()["data"] == []
    assert client.post("/api/auth/logout", headers=auth(token)).status_code == 200
    # nothing server-side to revoke
    assert client.get("/api/auth/me", headers=auth(token)).status_code == 200


def test_update_me_with_nulls_keeps_account_usable(client):
    token = register_user(client, displayName="Keep Me").json()["data"]["token"]

    r = client.put(
        "/api/auth/me",
        json={"theme": None, "preferences": None, "displayName": None, "avatarUrl": None, "username": None},
        headers=auth(token),
    )
    assert r.status_code == 200, r.text
    me = r.json()["data"]
    assert me["theme"] == "system"
    assert me["preferences"] == {}
    assert me["displayName"] == "Keep Me"
    assert me["avatarUrl"] is None

    assert client.get("/api/auth/me", headers=auth(token)).status_code == 200
    r = login_user(client)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["user"]["preferences"] == {}


def test_concurrent_duplicate_register_is_400(client, monkeypatch):
    assert register_user(client).status_code == 201

    # simulate a second register that slipped past the existence check
    monkeypatch.setattr(crud, "get_user_by_email", lambda *args, **kwargs: None)
    r = register_user(client)
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Email already registered"}

    # the session is still usable afterwards
    assert register_user(client, email="second@example.com").status_code == 201
