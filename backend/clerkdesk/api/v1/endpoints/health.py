"""
Health check: is the hosted service answering?
"""
from fastapi import APIRouter, Depends

from clerkdesk.api.deps import get_backend
from clerkdesk.core.logger import logger
from clerkdesk.db.backend import HostedBackend

router = APIRouter()


async def _check_hosted(backend: HostedBackend) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    data, error = await backend.auth.health()
    if error:
        logger.warning("Hosted service check failed: %s", error.message)
        return "error", error.message
    return "ok", "Hosted service reachable"


@router.get("/")
async def health(backend: HostedBackend = Depends(get_backend)):
    hosted_status, hosted_detail = await _check_hosted(backend)
    return {
        "status": "healthy" if hosted_status == "ok" else "degraded",
        "hosted": {"status": hosted_status, "detail": hosted_detail},
    }
