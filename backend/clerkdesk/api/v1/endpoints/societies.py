"""
Society summary: cases grouped by society
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.logger import logger
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import ListResponse, SocietyStats
from clerkdesk.services.aggregation import aggregate_societies

router = APIRouter()


@router.get("/", response_model=ListResponse[SocietyStats])
async def list_societies(
    q: Optional[str] = Query(None, description="Filter by society name"),
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    """
    Scans the society column of every case and counts per trimmed name.
    Recomputed on every call.
    """
    data, error = await backend.table(Collection.cases).select("society").execute()
    if error:
        logger.error("Error fetching society stats: %s", error.message)
        return {"items": [], "error": error.message}

    stats = aggregate_societies(data or [])
    if q:
        needle = q.lower()
        stats = [stat for stat in stats if needle in stat["name"].lower()]
    return {"items": stats, "error": None}
