"""
Admin console workflows

Clerk approval:
    application_submitted --approve--> approved
    application_submitted --reject---> inactive

Support tickets move between Open, In Progress, Resolved and Closed in any
direction; replies are written separately from status changes.

Every action is exactly one procedure call followed by a local update of the
affected entry. The list is not reloaded to confirm.
"""
from typing import Any, Dict, List, Optional

from clerkdesk.core.logger import logger
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import ApprovalAction, Rpc, TicketStatus
from clerkdesk.services.list_view import Record, patch_record, remove_record
from clerkdesk.utils.exceptions import BackendCallError, EmptyReplyError
from clerkdesk.utils.helpers import coerce_id


class _RpcListWorkflow:
    loader: Rpc

    def __init__(self, backend: HostedBackend):
        self.backend = backend
        self.items: List[Record] = []
        self.error: Optional[str] = None

    async def _fetch(self, rpc: Rpc) -> List[Record]:
        data, error = await self.backend.rpc(rpc)
        if error:
            logger.error("Error fetching %s: %s", rpc.value, error.message)
            self.error = error.message
            return self.items
        self.error = None
        return list(data or [])

    async def load(self):
        self.items = await self._fetch(self.loader)
        return self

    def state(self) -> Dict[str, Any]:
        return {"items": self.items, "error": self.error}


class ClerkApprovalWorkflow(_RpcListWorkflow):
    loader = Rpc.get_pending_requests

    async def load_active(self) -> Dict[str, Any]:
        """Approved and active clerks; a separate list from the pending one."""
        items = await self._fetch(Rpc.get_active_clerks)
        return {"items": items, "error": self.error}

    async def decide(self, user_id: str, action: ApprovalAction) -> "ClerkApprovalWorkflow":
        _, error = await self.backend.rpc(
            Rpc.update_clerk_status,
            {"user_id": user_id, "new_status": action.target_status.value},
        )
        if error:
            logger.error("Error %sing user %s: %s", action.value, user_id, error.message)
            raise BackendCallError(f"Failed to {action.value} user.", error)

        logger.info("Clerk %s %s", user_id, action.target_status.value)
        self.items = remove_record(self.items, user_id)
        return self

    async def approve(self, user_id: str) -> "ClerkApprovalWorkflow":
        return await self.decide(user_id, ApprovalAction.approve)

    async def reject(self, user_id: str) -> "ClerkApprovalWorkflow":
        return await self.decide(user_id, ApprovalAction.reject)


class SupportTicketWorkflow(_RpcListWorkflow):
    loader = Rpc.get_all_support_tickets

    async def set_status(self, ticket_id: Any, status: TicketStatus) -> "SupportTicketWorkflow":
        _, error = await self.backend.rpc(
            Rpc.update_support_status,
            {"ticket_id": coerce_id(ticket_id), "new_status": status.value},
        )
        if error:
            logger.error("Error updating status of ticket %s: %s", ticket_id, error.message)
            raise BackendCallError("Failed to update status", error)

        self.items = patch_record(self.items, ticket_id, {"status": status.value})
        return self

    async def reply(self, ticket_id: Any, text: str) -> "SupportTicketWorkflow":
        if not (text or "").strip():
            raise EmptyReplyError()

        _, error = await self.backend.rpc(
            Rpc.admin_reply_to_ticket,
            {"ticket_id": coerce_id(ticket_id), "response_text": text},
        )
        if error:
            logger.error("Error sending reply to ticket %s: %s", ticket_id, error.message)
            raise BackendCallError("Failed to send reply.", error)

        self.items = patch_record(self.items, ticket_id, {"admin_response": text})
        return self
