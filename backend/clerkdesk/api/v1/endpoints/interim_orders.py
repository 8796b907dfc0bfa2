"""
Interim order endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection
from clerkdesk.db.schemas import InterimOrder, InterimOrderCreate, ListResponse
from clerkdesk.services.list_view import OrderBy, RecordListView

router = APIRouter()


def order_view(backend: HostedBackend) -> RecordListView:
    # Undated orders sort after dated ones
    return RecordListView(
        backend,
        Collection.interim_orders,
        order=[OrderBy("order_date", nulls_first=False)],
        search_text=("case_name", "undated_text"),
        search_numbers=("case_no",),
    )


@router.get("/", response_model=ListResponse[InterimOrder])
async def list_interim_orders(
    q: Optional[str] = Query(None),
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await order_view(backend).refresh()
    return view.state(q)


@router.post("/", response_model=ListResponse[InterimOrder], status_code=status.HTTP_201_CREATED)
async def create_interim_order(
    payload: InterimOrderCreate,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = order_view(backend)
    await view.create(payload.model_dump(mode="json"), failure_message="Failed to add order")
    return view.state()
