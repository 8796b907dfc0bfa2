"""
Dashboard statistics endpoint
"""
from fastapi import APIRouter, Depends

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db import schemas
from clerkdesk.db.backend import HostedBackend
from clerkdesk.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/stats", response_model=schemas.DashboardStats)
async def get_dashboard_stats(
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    """
    Active cases, distinct societies, hearings in the next two weeks and total
    judgments. Each figure is queried on its own.
    """
    return await DashboardService(backend).stats()
