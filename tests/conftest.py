import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="whisperer-tests-")

# Settings are read at import time, so the environment has to be in place first.
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'whisperer.db')}"
os.environ["STORAGE_ROOT"] = os.path.join(_TMP_DIR, "uploads")
os.environ["ADMIN_VERIFY_TOKEN"] = "test-admin-token"
for _key in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "MISTRAL_API_KEY", "DEFAULT_CLAUDE_MODEL_ID", "ENABLE_DEBUG"):
    os.environ.pop(_key, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from whisperer.core.auth import create_session, get_home_workspace, provision_user  # noqa: E402
from whisperer.core.config import get_settings  # noqa: E402
from whisperer.core.database import SessionLocal, engine  # noqa: E402
from whisperer.main import app  # noqa: E402
from whisperer.models.base import Base  # noqa: E402
from whisperer.models.profile import Profile  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def settings_override(monkeypatch):
    """Set environment variables and rebuild the cached settings around a test."""

    def apply(**values):
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()

    yield apply
    get_settings.cache_clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    user, _ = provision_user(db, email="writer@example.com", name="Writer")
    return user


@pytest.fixture
def profile(db, user):
    return db.query(Profile).filter(Profile.user_id == user.id).first()


@pytest.fixture
def home_workspace(db, user):
    return get_home_workspace(db, user.id)


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def auth_client(client, db, user):
    session = create_session(db, user.id)
    client.headers["Authorization"] = f"Bearer {session.session_token}"
    return client
