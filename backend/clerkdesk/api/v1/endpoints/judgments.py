"""
Judgment register endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import Judgment, JudgmentCreate, ListResponse
from clerkdesk.services.list_view import OrderBy, RecordListView
from clerkdesk.utils.helpers import coerce_id

router = APIRouter()


def judgment_view(backend: HostedBackend) -> RecordListView:
    return RecordListView(
        backend,
        Collection.judgments,
        order=[OrderBy("judgment_date")],
        search_text=("case_name", "case_no", "judge_name"),
    )


@router.get("/", response_model=ListResponse[Judgment])
async def list_judgments(
    q: Optional[str] = Query(None),
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await judgment_view(backend).refresh()
    return view.state(q)


@router.post("/", response_model=ListResponse[Judgment], status_code=status.HTTP_201_CREATED)
async def create_judgment(
    payload: JudgmentCreate,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = judgment_view(backend)
    await view.create(payload.model_dump(mode="json"), failure_message="Failed to add judgment record")
    return view.state()


@router.delete("/{judgment_id}", response_model=ListResponse[Judgment])
async def delete_judgment(
    judgment_id: str,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await judgment_view(backend).refresh()
    await view.remove(coerce_id(judgment_id), failure_message="Failed to delete judgment record.")
    return view.state()
