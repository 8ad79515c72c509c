import time
from urllib.parse import parse_qs, urlparse

from whisperer.core import auth as auth_core
from whisperer.core.auth import HOME_WORKSPACE_DEFAULTS, create_session, provision_user
from whisperer.core.database import SessionLocal
from whisperer.core.exceptions import AuthenticationError
from whisperer.core.llm_list import FALLBACK_CLAUDE_MODEL_ID
from whisperer.models.profile import Profile
from whisperer.models.user import Account, User, UserSession
from whisperer.models.workspace import Workspace


def home_workspaces(db, user_id):
    return db.query(Workspace).filter(Workspace.user_id == user_id, Workspace.is_home == True).all()  # noqa: E712


def test_first_login_provisions_profile_and_home(db):
    user, created = provision_user(db, email="new@example.com", name="New Writer")

    assert created is True
    profile = db.query(Profile).filter(Profile.user_id == user.id).one()
    assert profile.display_name == "New Writer"
    assert profile.username == f"user{user.id[:8]}"
    assert profile.has_onboarded is False

    homes = home_workspaces(db, user.id)
    assert len(homes) == 1
    assert homes[0].name == HOME_WORKSPACE_DEFAULTS["name"]
    assert homes[0].default_prompt == "You are a friendly, helpful AI assistant."
    assert homes[0].default_model == FALLBACK_CLAUDE_MODEL_ID


def test_second_login_does_not_provision_again(db):
    first, _ = provision_user(db, email="new@example.com")
    second, created = provision_user(db, email="new@example.com")

    assert created is False
    assert second.id == first.id
    assert len(home_workspaces(db, first.id)) == 1


def test_concurrent_first_login_returns_winner(db, monkeypatch):
    other = SessionLocal()
    real_flush = db.flush
    raced = []

    def racing_flush(*args, **kwargs):
        if not raced:
            raced.append(True)
            other.add(User(email="race@example.com", name="Winner"))
            other.commit()
        return real_flush(*args, **kwargs)

    monkeypatch.setattr(db, "flush", racing_flush)
    try:
        user, created = provision_user(db, email="race@example.com", name="Loser")
    finally:
        other.close()

    assert created is False
    assert user.name == "Winner"
    assert db.query(User).filter(User.email == "race@example.com").count() == 1
    assert db.query(Profile).count() == 0


def test_safe_next_path():
    assert auth_core.safe_next_path("/abc/chat") == "/abc/chat"
    assert auth_core.safe_next_path("//evil.example.com") is None
    assert auth_core.safe_next_path("https://evil.example.com") is None
    assert auth_core.safe_next_path(None) is None


def fake_google(monkeypatch, email="callback@example.com"):
    monkeypatch.setattr(
        auth_core, "exchange_code", lambda code: {"access_token": "google-token", "expires_in": 3600}
    )
    monkeypatch.setattr(
        auth_core, "fetch_userinfo", lambda token: {"sub": "12345", "email": email, "name": "Callback User"}
    )


def test_callback_redirects_into_home_workspace(client, db, monkeypatch):
    fake_google(monkeypatch)

    response = client.get("/api/auth/callback", params={"code": "abc"}, follow_redirects=False)

    user = db.query(User).filter(User.email == "callback@example.com").one()
    home = home_workspaces(db, user.id)[0]
    assert response.status_code == 307
    assert response.headers["location"] == f"http://testserver/{home.id}/chat"
    assert "session_token=" in response.headers["set-cookie"]
    assert db.query(UserSession).filter(UserSession.user_id == user.id).count() == 1
    assert db.query(Account).filter(Account.provider_account_id == "12345").one().access_token == "google-token"


def test_callback_honours_next(client, monkeypatch):
    fake_google(monkeypatch)

    response = client.get("/api/auth/callback", params={"code": "abc", "next": "/scripts"}, follow_redirects=False)

    assert response.headers["location"] == "http://testserver/scripts"


def test_callback_without_home_goes_to_setup(client, db, monkeypatch):
    fake_google(monkeypatch)
    monkeypatch.setattr(auth_core, "get_home_workspace", lambda db, user_id: None)

    response = client.get("/api/auth/callback", params={"code": "abc"}, follow_redirects=False)

    assert response.headers["location"] == "http://testserver/setup"


def test_callback_exchange_failure_redirects_to_login(client, monkeypatch):
    def failing_exchange(code):
        raise AuthenticationError("invalid_grant")

    monkeypatch.setattr(auth_core, "exchange_code", failing_exchange)

    response = client.get("/api/auth/callback", params={"code": "bad"}, follow_redirects=False)

    location = urlparse(response.headers["location"])
    assert location.path == "/login"
    assert parse_qs(location.query)["message"] == ["invalid_grant"]


def test_session_requires_auth(client):
    response = client.get("/api/auth/session")

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


def test_session_reports_home_workspace(auth_client, user, home_workspace):
    response = auth_client.get("/api/auth/session")

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "writer@example.com"
    assert body["home_workspace_id"] == home_workspace.id


def test_expired_session_is_rejected_and_removed(client, db, user):
    session = create_session(db, user.id)
    session.expires = int(time.time()) - 10
    db.commit()
    token = session.session_token

    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert db.query(UserSession).filter(UserSession.session_token == token).count() == 0


def test_signout_deletes_session(auth_client, db, user):
    response = auth_client.post("/api/auth/signout")

    assert response.status_code == 200
    assert db.query(UserSession).filter(UserSession.user_id == user.id).count() == 0
