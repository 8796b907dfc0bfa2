"""
Entity vocabularies and hosted-service names

Rows live in the hosted data store; these enums mirror the values the
dashboard reads and writes.
"""

from __future__ import annotations

import enum

# ============================================================================
# Enums
# ============================================================================

class ClerkStatus(str, enum.Enum):
    """Clerk account lifecycle"""
    application_submitted = "application_submitted"
    approved = "approved"
    active = "active"
    inactive = "inactive"
    suspended = "suspended"

class ClerkRole(str, enum.Enum):
    clerk = "clerk"
    admin = "admin"

class CaseStatus(str, enum.Enum):
    """Case status (both vocabularies seen in stored rows)"""
    open = "Open"
    in_progress = "In Progress"
    hearing_scheduled = "Hearing Scheduled"
    closed = "Closed"
    archived = "Archived"
    active = "Active"
    disposed = "Disposed"

# Statuses that take a case off the active count
INACTIVE_CASE_STATUSES = (
    CaseStatus.closed.value,
    CaseStatus.archived.value,
    CaseStatus.disposed.value,
)

class PartyRole(str, enum.Enum):
    """Which side the firm represents"""
    none = ""
    plaintiff = "Plaintiff"
    defendant = "Defendant"
    petitioner = "Petitioner"
    respondent = "Respondent"

class TicketStatus(str, enum.Enum):
    open = "Open"
    in_progress = "In Progress"
    resolved = "Resolved"
    closed = "Closed"

class TicketPriority(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    critical = "Critical"

class TicketType(str, enum.Enum):
    feature_request = "Feature Request"
    bug_report = "Bug Report"
    general_inquiry = "General Inquiry"
    other = "Other"

class TransactionType(str, enum.Enum):
    income = "income"
    expense = "expense"

class ApprovalAction(str, enum.Enum):
    """Admin decision on a pending clerk application"""
    approve = "approve"
    reject = "reject"

    @property
    def target_status(self) -> ClerkStatus:
        if self is ApprovalAction.approve:
            return ClerkStatus.approved
        return ClerkStatus.inactive

# ============================================================================
# Hosted service names
# ============================================================================

class Collection(str, enum.Enum):
    """Row collections exposed by the hosted REST layer"""
    cases = "cases"
    case_copies = "case_copies"
    case_names = "case_names"
    interim_orders = "interim_orders"
    judgments = "judgments"
    clerk_users = "clerk_users"
    support_requests = "support_requests"
    releases = "releases"
    transactions = "transactions"

class Rpc(str, enum.Enum):
    """Remote procedures defined by the hosted backend"""
    get_application_status = "get_application_status"
    clerk_login = "clerk_login"
    admin_login = "admin_login"
    get_pending_requests = "get_pending_requests"
    get_active_clerks = "get_active_clerks"
    update_clerk_status = "update_clerk_status"
    get_all_support_tickets = "get_all_support_tickets"
    update_support_status = "update_support_status"
    admin_reply_to_ticket = "admin_reply_to_ticket"
