# whisperer/core/auth.py
"""
Google sign-in, first-login provisioning, and database-backed sessions.
"""
import logging
import secrets
import time
from typing import Optional, Tuple
from urllib.parse import urlencode

import httpx
from fastapi import Depends, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from whisperer.core.config import get_settings
from whisperer.core.database import get_db
from whisperer.core.exceptions import AuthenticationError, NotFoundError
from whisperer.core.llm_list import default_claude_model_id
from whisperer.models.base import new_id
from whisperer.models.profile import Profile
from whisperer.models.user import Account, User, UserSession
from whisperer.models.workspace import Workspace

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
OAUTH_SCOPES = "openid email profile"

SESSION_COOKIE = "session_token"

HOME_WORKSPACE_DEFAULTS = {
    "name": "Home",
    "description": "My home workspace.",
    "instructions": "",
    "default_context_length": 4096,
    "default_prompt": "You are a friendly, helpful AI assistant.",
    "default_temperature": 0.5,
    "embeddings_provider": "openai",
    "include_profile_context": True,
    "include_workspace_instructions": True,
}


def safe_next_path(next_path: Optional[str]) -> Optional[str]:
    """Only same-origin paths are allowed as post-login targets."""
    if next_path and next_path.startswith("/") and not next_path.startswith("//"):
        return next_path
    return None


def build_authorization_url(next_path: Optional[str] = None) -> str:
    settings = get_settings()
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.oauth_redirect_uri,
        "response_type": "code",
        "scope": OAUTH_SCOPES,
        "access_type": "offline",
        "prompt": "select_account",
    }
    next_path = safe_next_path(next_path)
    if next_path:
        params["state"] = next_path
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def exchange_code(code: str) -> dict:
    """Trades an authorization code for Google tokens."""
    settings = get_settings()
    response = httpx.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "redirect_uri": settings.oauth_redirect_uri,
            "grant_type": "authorization_code",
        },
        timeout=15.0,
    )
    if response.status_code != 200:
        body = response.json() if response.headers.get("content-type", "").startswith("application/json") else {}
        raise AuthenticationError(body.get("error_description") or body.get("error") or "Code exchange failed")
    return response.json()


def fetch_userinfo(access_token: str) -> dict:
    response = httpx.get(
        GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=15.0,
    )
    if response.status_code != 200:
        raise AuthenticationError("Could not load Google user info")
    return response.json()


def provision_user(db: Session, email: str, name: Optional[str] = None, image: Optional[str] = None) -> Tuple[User, bool]:
    """
    Returns (user, created). A previously unseen email gets a user row, a
    default profile and a home workspace, all in one transaction.

    The unique constraint on users.email settles races: if a concurrent
    request inserts the same email first, our insert fails, we roll back and
    hand back the row the other request created.
    """
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user, False

    user_id = new_id()
    user = User(id=user_id, name=name, email=email, image=image)
    profile = Profile(
        user_id=user_id,
        display_name=name or "User",
        username=f"user{user_id[:8]}",
        bio="",
        profile_context="",
        use_azure_openai=False,
        has_onboarded=False,
    )
    workspace = Workspace(
        user_id=user_id,
        is_home=True,
        default_model=default_claude_model_id(),
        **HOME_WORKSPACE_DEFAULTS,
    )
    try:
        db.add(user)
        db.flush()
        db.add(profile)
        db.add(workspace)
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = db.query(User).filter(User.email == email).first()
        if existing is None:
            raise
        logger.info("User %s was provisioned by a concurrent request", email)
        return existing, False

    db.refresh(user)
    logger.info("Provisioned new user %s with home workspace %s", user.id, workspace.id)
    return user, True


def link_account(db: Session, user: User, provider: str, provider_account_id: str, tokens: dict) -> Account:
    account = (
        db.query(Account)
        .filter(Account.provider == provider, Account.provider_account_id == provider_account_id)
        .first()
    )
    if account is None:
        account = Account(user_id=user.id, provider=provider, provider_account_id=provider_account_id)
        db.add(account)

    account.access_token = tokens.get("access_token")
    account.refresh_token = tokens.get("refresh_token") or account.refresh_token
    account.id_token = tokens.get("id_token")
    account.token_type = tokens.get("token_type")
    account.scope = tokens.get("scope")
    if tokens.get("expires_in"):
        account.expires_at = int(time.time()) + int(tokens["expires_in"])
    db.commit()
    return account


def create_session(db: Session, user_id: str) -> UserSession:
    max_age = get_settings().session_max_age_days * 24 * 60 * 60
    session = UserSession(
        session_token=secrets.token_urlsafe(32),
        user_id=user_id,
        expires=int(time.time()) + max_age,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def delete_session(db: Session, session_token: str) -> None:
    db.query(UserSession).filter(UserSession.session_token == session_token).delete()
    db.commit()


def get_home_workspace(db: Session, user_id: str) -> Optional[Workspace]:
    return (
        db.query(Workspace)
        .filter(Workspace.user_id == user_id, Workspace.is_home == True)  # noqa: E712
        .first()
    )


def session_token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[len("bearer "):].strip() or None
    return None


def get_current_session(request: Request, db: Session = Depends(get_db)) -> UserSession:
    token = session_token_from_request(request)
    if not token:
        raise AuthenticationError()

    session = db.query(UserSession).filter(UserSession.session_token == token).first()
    if session is None:
        raise AuthenticationError()
    if session.expires <= int(time.time()):
        db.delete(session)
        db.commit()
        raise AuthenticationError("Session expired")
    return session


def get_current_user(session: UserSession = Depends(get_current_session), db: Session = Depends(get_db)) -> User:
    user = db.query(User).filter(User.id == session.user_id).first()
    if user is None:
        raise AuthenticationError()
    return user


def get_current_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile
