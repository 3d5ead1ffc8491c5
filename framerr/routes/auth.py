"""Login, logout and session introspection."""

import os

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from framerr.auth import get_current_user, verify_password
from framerr.core.constants import SESSION_COOKIE_NAME
from framerr.core.exceptions import AuthenticationError
from framerr.core.helpers import get_path, utcnow
from framerr.core.logging import get_logger
from framerr.extensions import get_db
from framerr.models import User, UserSession
from framerr.models.session import DEFAULT_SESSION_TIMEOUT_MS
from framerr.schemas.auth import LoginRequest
from framerr.services.system_config import get_system_config

logger = get_logger("routes.auth")
router = APIRouter(prefix="/api/auth", tags=["Auth"])

SECURE_COOKIES = os.getenv("FRAMERR_SECURE_COOKIES", "false").lower() == "true"
REMEMBER_ME_TIMEOUT_MS = 30 * 86_400_000


@router.post("/login")
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Check credentials and start a cookie session."""
    user = User.find_by_username(db, payload.username)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.username)
        raise AuthenticationError("Invalid username or password")

    config = get_system_config(db)
    timeout_ms = get_path(
        config, "auth", "session", "timeout", default=DEFAULT_SESSION_TIMEOUT_MS
    )
    if payload.remember_me:
        timeout_ms = max(timeout_ms, REMEMBER_ME_TIMEOUT_MS)

    session = UserSession.start(
        db,
        user.id,
        timeout_ms=timeout_ms,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    user.last_login = utcnow()
    db.commit()

    response.set_cookie(
        SESSION_COOKIE_NAME,
        session.id,
        max_age=timeout_ms // 1000,
        httponly=True,
        secure=SECURE_COOKIES,
        samesite="lax",
    )
    logger.info("User %s logged in", user.username)
    return {"user": user.to_dict()}


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """
    End the cookie session.

    With proxy auth and ``overrideLogout`` set, the response also carries
    the proxy's logout URL so the client can end the upstream session.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        session = db.get(UserSession, token)
        if session is not None:
            db.delete(session)
            db.commit()
    response.delete_cookie(SESSION_COOKIE_NAME)

    body = {"success": True}
    proxy = get_path(get_system_config(db), "auth", "proxy", default={})
    if proxy.get("enabled") and proxy.get("overrideLogout") and proxy.get("logoutUrl"):
        body["redirectUrl"] = proxy["logoutUrl"]
    return body


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"user": user.to_dict()}
