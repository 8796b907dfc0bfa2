"""
Support request endpoints (clerk side)
"""
from fastapi import APIRouter, Depends, status

from clerkdesk.api.deps import get_backend, require_session
from clerkdesk.core.session import HostedSession, Session, session_email
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection, TicketStatus
from clerkdesk.db.schemas import ListResponse, MessageResponse, SupportRequestCreate, SupportTicket
from clerkdesk.services.list_view import AfterWrite, OrderBy, RecordListView

router = APIRouter()


def history_view(backend: HostedBackend) -> RecordListView:
    return RecordListView(backend, Collection.support_requests, order=[OrderBy("created_at")])


@router.get("/", response_model=ListResponse[SupportTicket])
async def request_history(
    _: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    view = await history_view(backend).refresh()
    return view.state()


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: SupportRequestCreate,
    session: Session = Depends(require_session),
    backend: HostedBackend = Depends(get_backend)
):
    """
    New tickets start Open. The requester is identified by the hosted
    session's email, or the local session's when there is no hosted one.
    """
    row = {
        "user_id": session.user_id if isinstance(session, HostedSession) else None,
        "user_email": session_email(session),
        **payload.model_dump(mode="json"),
        "status": TicketStatus.open.value,
    }
    await history_view(backend).create(
        row,
        failure_message="Failed to submit request. Please try again.",
        after=AfterWrite.keep,
    )
    return {"message": "Request submitted successfully!"}
