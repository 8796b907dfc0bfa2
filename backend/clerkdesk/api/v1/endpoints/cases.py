"""
Case record endpoints
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import CaseCreate, CaseListResponse, CaseUpdate
from clerkdesk.services.aggregation import count_by_status
from clerkdesk.services.list_view import OrderBy, RecordListView
from clerkdesk.utils.helpers import coerce_id

router = APIRouter()

SAVE_FAILED = "Failed to save case record."
DELETE_FAILED = "Failed to delete case record."


def case_view(backend: HostedBackend) -> RecordListView:
    return RecordListView(
        backend,
        Collection.cases,
        order=[OrderBy("created_at")],
        search_text=("case_name", "name"),
        search_numbers=("case_no",),
    )


def _envelope(view: RecordListView, q: Optional[str] = None) -> Dict[str, Any]:
    state = view.state(q)
    state["status_counts"] = count_by_status(view.items)
    return state


@router.get("/", response_model=CaseListResponse)
async def list_cases(
    q: Optional[str] = Query(None, description="Case type, party name or case number"),
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await case_view(backend).refresh()
    return _envelope(view, q)


@router.post("/", response_model=CaseListResponse, status_code=status.HTTP_201_CREATED)
async def create_case(
    payload: CaseCreate,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    """Insert the form as submitted, then reload the list."""
    view = case_view(backend)
    await view.create(payload.model_dump(mode="json"), failure_message=SAVE_FAILED)
    return _envelope(view)


@router.put("/{case_id}", response_model=CaseListResponse)
async def update_case(
    case_id: str,
    payload: CaseUpdate,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = case_view(backend)
    await view.update(coerce_id(case_id), payload.model_dump(mode="json"), failure_message=SAVE_FAILED)
    return _envelope(view)


@router.delete("/{case_id}", response_model=CaseListResponse)
async def delete_case(
    case_id: str,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await case_view(backend).refresh()
    await view.remove(coerce_id(case_id), failure_message=DELETE_FAILED)
    return _envelope(view)
