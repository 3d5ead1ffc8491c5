"""
Authentication dependencies.

A request is authenticated either by the ``framerr_session`` cookie or, when
reverse-proxy auth is enabled, by a username header set by a trusted proxy
(Authentik, Authelia ...). Proxy headers are only honoured when the direct
client address is in the configured whitelist; otherwise they are ignored.
"""

from __future__ import annotations

import ipaddress

import bcrypt
from fastapi import Depends, Request

from framerr.core.constants import SESSION_COOKIE_NAME
from framerr.core.exceptions import AuthenticationError, PermissionDeniedError
from framerr.core.helpers import get_path
from framerr.core.logging import get_logger
from framerr.extensions import get_db
from framerr.models import User, UserSession
from framerr.services.system_config import get_system_config

logger = get_logger("auth")

DEFAULT_PROXY_HEADER = "X-authentik-username"
FALLBACK_PROXY_HEADERS = ("x-forwarded-user", "remote-user")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def _normalise_ip(address: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped:
        return ip.ipv4_mapped
    return ip


def is_whitelisted(address: str | None, whitelist: list[str] | str | None) -> bool:
    """
    Check a client address against IPs and CIDR ranges.

    Args:
        address: Direct client address.
        whitelist: Entries like ``10.0.0.5`` or ``172.16.0.0/12``.

    Returns:
        True if any entry contains the address.
    """
    if not address or not whitelist:
        return False
    if isinstance(whitelist, str):
        whitelist = [entry.strip() for entry in whitelist.split(",")]

    ip = _normalise_ip(address)
    if ip is None:
        return False

    for entry in whitelist:
        try:
            if ip in ipaddress.ip_network(entry, strict=False):
                return True
        except ValueError:
            logger.warning("Ignoring invalid proxy whitelist entry: %s", entry)
    return False


def _proxy_user(db, request: Request) -> User | None:
    proxy = get_path(get_system_config(db), "auth", "proxy", default={})
    if not proxy.get("enabled"):
        return None

    header = (proxy.get("headerName") or DEFAULT_PROXY_HEADER).lower()
    username = request.headers.get(header)
    for fallback in FALLBACK_PROXY_HEADERS:
        username = username or request.headers.get(fallback)
    if not username:
        return None

    client = request.client.host if request.client else None
    if not is_whitelisted(client, proxy.get("whitelist")):
        logger.warning("Ignoring proxy auth header from untrusted address %s", client)
        return None

    user = User.find_by_username(db, username)
    if user is None:
        logger.debug("Proxy auth user %s has no Framerr account", username)
    return user


def _session_user(db, request: Request) -> User | None:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    session = db.get(UserSession, token)
    if session is None:
        return None
    if session.expired:
        db.delete(session)
        db.commit()
        return None
    return db.get(User, session.user_id)


def get_optional_user(request: Request, db=Depends(get_db)) -> User | None:
    """Authenticated user, or None for anonymous requests."""
    return _proxy_user(db, request) or _session_user(db, request)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Dependency requiring an authenticated user."""
    if user is None:
        raise AuthenticationError()
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency requiring an admin."""
    if not user.is_admin:
        logger.warning("Admin access denied for user %s", user.username)
        raise PermissionDeniedError()
    return user
