# clerkdesk/api/deps.py

from typing import Iterable, Optional

from fastapi import Depends, Request

from clerkdesk.core.config import settings
from clerkdesk.core.logger import logger
from clerkdesk.core.session import (
    Session,
    SessionSource,
    SessionStore,
    has_admin_marker,
)
from clerkdesk.db.backend import HostedBackend, get_backend
from clerkdesk.utils.exceptions import RedirectRequired

# ============================================================================
# Session guards
# ============================================================================

class SessionGuard:
    """
    Route guard over the resolved session.

    ``sources`` names the session variants this guard consults. A missing
    session redirects to ``redirect_when_missing``; a present one redirects to
    ``redirect_when_present``. The attempted destination is not kept.
    """

    def __init__(
        self,
        sources: Iterable[SessionSource],
        redirect_when_missing: Optional[str] = None,
        redirect_when_present: Optional[str] = None,
    ):
        self.sources = tuple(sources)
        self.redirect_when_missing = redirect_when_missing
        self.redirect_when_present = redirect_when_present

    async def __call__(
        self,
        request: Request,
        backend: HostedBackend = Depends(get_backend)
    ) -> Session:
        session = await SessionStore(request, backend).resolve(self.sources)

        if session is None and self.redirect_when_missing:
            logger.info("No session for %s, redirecting", request.url.path)
            raise RedirectRequired(self.redirect_when_missing)

        if session is not None and self.redirect_when_present:
            raise RedirectRequired(self.redirect_when_present)

        return session


# Protected clerk routes: either session variant will do
require_session = SessionGuard(
    (SessionSource.hosted, SessionSource.local),
    redirect_when_missing=settings.LOGIN_PATH,
)

# Login, signup and status: only a hosted session bounces the caller home
public_only = SessionGuard(
    (SessionSource.hosted,),
    redirect_when_present=settings.HOME_PATH,
)


# ============================================================================
# Admin marker
# ============================================================================

def require_admin_marker(request: Request) -> bool:
    """Admin console routes check the marker only, never the clerk session."""
    if not has_admin_marker(request):
        raise RedirectRequired(settings.ADMIN_LOGIN_PATH)
    return True


__all__ = [
    "SessionGuard",
    "require_session",
    "public_only",
    "require_admin_marker",
    "get_backend",
]
