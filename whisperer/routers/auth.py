# whisperer/routers/auth.py
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from whisperer.core import auth as auth_core
from whisperer.core.config import get_settings
from whisperer.core.database import get_db
from whisperer.core.exceptions import AuthenticationError
from whisperer.models.profile import Profile
from whisperer.models.user import User, UserSession
from whisperer.schemas.auth import SessionResponse, SessionUser

logger = logging.getLogger(__name__)

router = APIRouter()


def _origin(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.get("/signin")
def signin(next: Optional[str] = None):
    """
    Sends the browser to Google's consent screen. The post-login target
    travels through the OAuth state parameter.
    """
    return RedirectResponse(auth_core.build_authorization_url(next))


@router.get("/callback")
def callback(
    request: Request,
    code: Optional[str] = None,
    next: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    OAuth redirect target.

    - Exchanges **code** for tokens and provisions the user on first login.
    - Starts a session (cookie `session_token`).
    - Redirects to **next** when given, otherwise into the user's home
      workspace, or to `/setup` when there is none.

    Failures redirect to `/login` with the reason in `message`.
    """
    origin = _origin(request)
    next_path = auth_core.safe_next_path(next) or auth_core.safe_next_path(state)

    if not code:
        return RedirectResponse(origin + (next_path or "/"))

    try:
        tokens = auth_core.exchange_code(code)
        userinfo = auth_core.fetch_userinfo(tokens["access_token"])
        user, created = auth_core.provision_user(
            db,
            email=userinfo["email"],
            name=userinfo.get("name"),
            image=userinfo.get("picture"),
        )
        auth_core.link_account(db, user, "google", str(userinfo["sub"]), tokens)
        session = auth_core.create_session(db, user.id)
    except AuthenticationError as e:
        logger.warning("Auth exchange error: %s", e.message)
        return RedirectResponse(f"{origin}/login?message={quote(e.message)}")
    except Exception:
        logger.exception("Unexpected auth callback error")
        return RedirectResponse(
            f"{origin}/login?message={quote('Authentication failed. Please try again.')}"
        )

    if next_path:
        target = origin + next_path
    else:
        home = auth_core.get_home_workspace(db, user.id)
        if home:
            target = f"{origin}/{home.id}/chat"
        else:
            logger.error("Workspace not found for user %s", user.id)
            target = f"{origin}/setup"

    response = RedirectResponse(target)
    response.set_cookie(
        auth_core.SESSION_COOKIE,
        session.session_token,
        max_age=get_settings().session_max_age_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/session", response_model=SessionResponse)
def read_session(
    session: UserSession = Depends(auth_core.get_current_session),
    user: User = Depends(auth_core.get_current_user),
    db: Session = Depends(get_db),
):
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    home = auth_core.get_home_workspace(db, user.id)
    return SessionResponse(
        user=SessionUser(id=user.id, email=user.email, name=user.name, image=user.image),
        profile_id=profile.id if profile else None,
        home_workspace_id=home.id if home else None,
        expires=session.expires,
    )


@router.post("/signout")
def signout(response: Response, session: UserSession = Depends(auth_core.get_current_session), db: Session = Depends(get_db)):
    auth_core.delete_session(db, session.session_token)
    response.delete_cookie(auth_core.SESSION_COOKIE)
    return {"detail": "Signed out."}
