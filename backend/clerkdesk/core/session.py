"""
Session store

Three independent markers are kept in client storage (cookies):

- hosted session: token pair issued by the hosted identity service
- local fallback session: the clerk row returned by the custom login procedure,
  for clerks who were never provisioned in hosted auth
- admin marker: a plain flag written by the admin console login

None of them is verified cryptographically here. Token expiry is read from the
unverified JWT claims; the backend remains the authority on validity.
"""
from __future__ import annotations

import enum
import json
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Union

import jwt
from fastapi import Request, Response

from clerkdesk.core.config import settings
from clerkdesk.core.logger import logger

if TYPE_CHECKING:
    from clerkdesk.db.backend import HostedBackend

# Local storage has no expiry; the cookie equivalent is the browser maximum.
PERSISTENT_COOKIE_MAX_AGE = 60 * 60 * 24 * 400

LOCAL_SESSION_FIELDS = ("id", "email", "full_name", "role", "status")


class SessionSource(str, enum.Enum):
    hosted = "hosted"
    local = "local"


@dataclass(frozen=True)
class HostedSession:
    access_token: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None

    @property
    def source(self) -> SessionSource:
        return SessionSource.hosted


@dataclass(frozen=True)
class LocalSession:
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None

    @property
    def source(self) -> SessionSource:
        return SessionSource.local


Session = Union[HostedSession, LocalSession, None]


def session_email(session: Session) -> Optional[str]:
    return session.email if session is not None else None


# ============================================================================
# Readers
# ============================================================================

def _unverified_claims(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def read_hosted_cookie(request: Request) -> Optional[HostedSession]:
    """
    Hosted session from the session cookie, or a bearer header for API
    callers. Unparseable or expired tokens count as no session.
    """
    payload: Dict[str, Any] = {}
    raw = request.cookies.get(settings.HOSTED_SESSION_COOKIE)
    if raw:
        try:
            parsed = json.loads(raw)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            payload = parsed

    token = payload.get("access_token") or _bearer_token(request)
    if not token:
        return None

    claims = _unverified_claims(token)
    if claims is None:
        return None

    exp = claims.get("exp") or payload.get("expires_at")
    if exp:
        try:
            exp = int(exp)
        except (TypeError, ValueError):
            logger.warning("Hosted session has an unreadable expiry", extra={"sub": claims.get("sub")})
            return None
        if exp <= int(time.time()):
            logger.info("Hosted session token expired", extra={"sub": claims.get("sub")})
            return None

    user = payload.get("user") if isinstance(payload.get("user"), dict) else {}
    return HostedSession(
        access_token=token,
        user_id=user.get("id") or claims.get("sub"),
        email=user.get("email") or claims.get("email"),
        refresh_token=payload.get("refresh_token"),
        expires_at=exp or None,
    )


def read_local_session(request: Request) -> Optional[LocalSession]:
    raw = request.cookies.get(settings.LOCAL_SESSION_KEY)
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(payload, dict) or not payload.get("id"):
        return None
    return LocalSession(**{key: payload.get(key) for key in LOCAL_SESSION_FIELDS})


def has_admin_marker(request: Request) -> bool:
    return bool(request.cookies.get(settings.ADMIN_SESSION_KEY))


# ============================================================================
# Writers
# ============================================================================

def _set_cookie(response: Response, key: str, value: str, max_age: Optional[int]) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def write_hosted_session(response: Response, auth_payload: Dict[str, Any]) -> None:
    """Persist the token pair returned by hosted sign-in."""
    user = auth_payload.get("user") or {}
    value = {
        "access_token": auth_payload.get("access_token"),
        "refresh_token": auth_payload.get("refresh_token"),
        "expires_at": auth_payload.get("expires_at"),
        "user": {"id": user.get("id"), "email": user.get("email")},
    }
    max_age = auth_payload.get("expires_in")
    _set_cookie(
        response,
        settings.HOSTED_SESSION_COOKIE,
        json.dumps(value, separators=(",", ":")),
        int(max_age) if max_age else None,
    )


def write_local_session(response: Response, user: Dict[str, Any]) -> None:
    value = {key: user.get(key) for key in LOCAL_SESSION_FIELDS}
    _set_cookie(
        response,
        settings.LOCAL_SESSION_KEY,
        json.dumps(value, separators=(",", ":")),
        PERSISTENT_COOKIE_MAX_AGE,
    )


def write_admin_marker(response: Response) -> None:
    _set_cookie(response, settings.ADMIN_SESSION_KEY, "true", PERSISTENT_COOKIE_MAX_AGE)


def clear_hosted_session(response: Response) -> None:
    response.delete_cookie(settings.HOSTED_SESSION_COOKIE)


def clear_admin_marker(response: Response) -> None:
    response.delete_cookie(settings.ADMIN_SESSION_KEY)


# ============================================================================
# Resolution
# ============================================================================

class SessionStore:
    """
    Resolves the session for one request.

    Sources are always consulted hosted first, local fallback second; the
    caller decides which of them count.
    """

    def __init__(
        self,
        request: Request,
        backend: Optional["HostedBackend"] = None,
        verify: Optional[bool] = None,
    ) -> None:
        self.request = request
        self.backend = backend
        self.verify = settings.HOSTED_SESSION_VERIFY if verify is None else verify

    async def hosted(self) -> Optional[HostedSession]:
        try:
            session = read_hosted_cookie(self.request)
            if session is None or not self.verify or self.backend is None:
                return session

            data, error = await self.backend.auth.get_user(session.access_token)
            if error or not isinstance(data, dict):
                logger.warning(
                    "Hosted session rejected",
                    extra={"error": error.message if error else "empty user"},
                )
                return None
            return replace(
                session,
                user_id=data.get("id") or session.user_id,
                email=data.get("email") or session.email,
            )
        except Exception:
            # Resolution never surfaces errors; protected routes fail closed.
            logger.exception("Hosted session resolution failed")
            return None

    def local(self) -> Optional[LocalSession]:
        return read_local_session(self.request)

    async def resolve(self, sources: Iterable[SessionSource] = (SessionSource.hosted, SessionSource.local)) -> Session:
        wanted = set(sources)
        if SessionSource.hosted in wanted:
            hosted = await self.hosted()
            if hosted is not None:
                return hosted
        if SessionSource.local in wanted:
            return self.local()
        return None
