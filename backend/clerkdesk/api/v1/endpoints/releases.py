"""
Release notes (read-only)
"""
from fastapi import APIRouter, Depends

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import ListResponse, Release
from clerkdesk.services.list_view import OrderBy, RecordListView

router = APIRouter()


@router.get("/", response_model=ListResponse[Release])
async def list_releases(
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await RecordListView(backend, Collection.releases, order=[OrderBy("created_at")]).refresh()
    return view.state()
