"""
Certified case copy endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import CaseCopy, CaseCopyCreate, ListResponse
from clerkdesk.services.list_view import AfterWrite, OrderBy, RecordListView
from clerkdesk.utils.helpers import coerce_id

router = APIRouter()


def copy_view(backend: HostedBackend) -> RecordListView:
    return RecordListView(
        backend,
        Collection.case_copies,
        order=[OrderBy("date")],
        search_text=("case_name", "case_no", "doctype"),
    )


@router.get("/", response_model=ListResponse[CaseCopy])
async def list_case_copies(
    q: Optional[str] = Query(None),
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await copy_view(backend).refresh()
    return view.state(q)


@router.post("/", response_model=ListResponse[CaseCopy], status_code=status.HTTP_201_CREATED)
async def create_case_copy(
    payload: CaseCopyCreate,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    """Insert and put the stored row at the head of the list."""
    view = await copy_view(backend).refresh()
    await view.create(
        payload.model_dump(mode="json"),
        failure_message="Failed to save record.",
        after=AfterWrite.prepend,
    )
    return view.state()


@router.delete("/{copy_id}", response_model=ListResponse[CaseCopy])
async def delete_case_copy(
    copy_id: str,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await copy_view(backend).refresh()
    await view.remove(coerce_id(copy_id), failure_message="Failed to delete record.")
    return view.state()
