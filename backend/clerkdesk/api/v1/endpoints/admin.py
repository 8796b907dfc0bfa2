"""
Admin console endpoints

Everything except login and logout requires the admin marker cookie.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response

from clerkdesk.api.deps import get_backend, require_admin_marker
from clerkdesk.core.config import settings
from clerkdesk.core.session import clear_admin_marker, write_admin_marker
from clerkdesk.db import schemas
from clerkdesk.db.backend import HostedBackend
from clerkdesk.services.admin_workflow import ClerkApprovalWorkflow, SupportTicketWorkflow
from clerkdesk.services.auth_service import AuthService

router = APIRouter()

ClerkList = schemas.ListResponse[schemas.ClerkUser]
TicketList = schemas.ListResponse[schemas.SupportTicket]

# ============================================================================
# Admin session
# ============================================================================

@router.post("/login", response_model=schemas.MessageResponse)
async def admin_login(
    payload: schemas.AdminLoginRequest,
    response: Response,
    backend: HostedBackend = Depends(get_backend)
):
    await AuthService(backend).admin_login(payload.email, payload.password)
    write_admin_marker(response)
    return {"message": "Admin signed in", "redirect_to": settings.ADMIN_HOME_PATH}


@router.post("/logout", response_model=schemas.MessageResponse)
async def admin_logout(response: Response):
    clear_admin_marker(response)
    return {"message": "Admin signed out", "redirect_to": settings.ADMIN_LOGIN_PATH}


# ============================================================================
# Clerk applications
# ============================================================================

@router.get("/requests", response_model=ClerkList, dependencies=[Depends(require_admin_marker)])
async def pending_requests(backend: HostedBackend = Depends(get_backend)) -> Dict[str, Any]:
    workflow = await ClerkApprovalWorkflow(backend).load()
    return workflow.state()


@router.get("/clerks", response_model=ClerkList, dependencies=[Depends(require_admin_marker)])
async def active_clerks(backend: HostedBackend = Depends(get_backend)) -> Dict[str, Any]:
    return await ClerkApprovalWorkflow(backend).load_active()


@router.post("/requests/{user_id}/approve", response_model=ClerkList, dependencies=[Depends(require_admin_marker)])
async def approve_request(user_id: str, backend: HostedBackend = Depends(get_backend)) -> Dict[str, Any]:
    """Approve one application and return the remaining pending list."""
    workflow = await ClerkApprovalWorkflow(backend).load()
    await workflow.approve(user_id)
    return workflow.state()


@router.post("/requests/{user_id}/reject", response_model=ClerkList, dependencies=[Depends(require_admin_marker)])
async def reject_request(user_id: str, backend: HostedBackend = Depends(get_backend)) -> Dict[str, Any]:
    workflow = await ClerkApprovalWorkflow(backend).load()
    await workflow.reject(user_id)
    return workflow.state()


# ============================================================================
# Support tickets
# ============================================================================

@router.get("/tickets", response_model=TicketList, dependencies=[Depends(require_admin_marker)])
async def support_tickets(backend: HostedBackend = Depends(get_backend)) -> Dict[str, Any]:
    workflow = await SupportTicketWorkflow(backend).load()
    return workflow.state()


@router.patch("/tickets/{ticket_id}/status", response_model=TicketList, dependencies=[Depends(require_admin_marker)])
async def update_ticket_status(
    ticket_id: str,
    payload: schemas.TicketStatusUpdate,
    backend: HostedBackend = Depends(get_backend)
) -> Dict[str, Any]:
    workflow = await SupportTicketWorkflow(backend).load()
    await workflow.set_status(ticket_id, payload.status)
    return workflow.state()


@router.post("/tickets/{ticket_id}/reply", response_model=TicketList, dependencies=[Depends(require_admin_marker)])
async def reply_to_ticket(
    ticket_id: str,
    payload: schemas.TicketReply,
    backend: HostedBackend = Depends(get_backend)
) -> Dict[str, Any]:
    workflow = await SupportTicketWorkflow(backend).load()
    await workflow.reply(ticket_id, payload.response_text)
    return workflow.state()
