"""
Income and expense ledger endpoints
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import Session
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection, TransactionType
from clerkdesk.db.schemas import TransactionCreate, TransactionListResponse
from clerkdesk.services.aggregation import total_amount
from clerkdesk.services.list_view import OrderBy, RecordListView
from clerkdesk.utils.helpers import coerce_id

router = APIRouter()


def ledger_view(backend: HostedBackend, kind: TransactionType) -> RecordListView:
    return RecordListView(
        backend,
        Collection.transactions,
        filters={"type": kind.value},
        order=[OrderBy("date")],
    )


def _envelope(view: RecordListView) -> Dict[str, Any]:
    state = view.state()
    state["total"] = total_amount(view.items)
    return state


@router.get("/{kind}", response_model=TransactionListResponse)
async def list_transactions(
    kind: TransactionType,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await ledger_view(backend, kind).refresh()
    return _envelope(view)


@router.post("/{kind}", response_model=TransactionListResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    kind: TransactionType,
    payload: TransactionCreate,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = ledger_view(backend, kind)
    row = {"type": kind.value, **payload.model_dump(mode="json")}
    await view.create(row, failure_message="Failed to add transaction. Please try again.")
    return _envelope(view)


@router.delete("/{kind}/{transaction_id}", response_model=TransactionListResponse)
async def delete_transaction(
    kind: TransactionType,
    transaction_id: str,
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await ledger_view(backend, kind).refresh()
    await view.remove(coerce_id(transaction_id), failure_message="Failed to delete transaction.")
    return _envelope(view)
