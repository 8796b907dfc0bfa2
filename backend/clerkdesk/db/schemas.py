"""
Pydantic validation schemas
"""
import datetime as dt
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from clerkdesk.db.models import (
    CaseStatus,
    PartyRole,
    TicketPriority,
    TicketStatus,
    TicketType,
)


def _current_year() -> int:
    return dt.date.today().year


def _current_year_str() -> str:
    return str(dt.date.today().year)


# Dropdown sources
INTERIM_ORDER_CASE_NAMES = ["WP(C)", "Trp(C)", "CrlMc", "CoC", "WA", "OP(C)"]
PAYMENT_METHODS = ["Cash", "Bank Transfer", "Cheque", "UPI", "Card"]


class HostedRow(BaseModel):
    """Row as stored by the hosted service; unknown columns pass through."""
    model_config = ConfigDict(extra="allow")

    id: Any = None
    created_at: Optional[str] = None


# ============================================================================
# Auth Schemas
# ============================================================================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminLoginRequest(LoginRequest):
    pass


class SignupRequest(BaseModel):
    """Clerk application form"""
    full_name: str = Field(..., min_length=1, max_length=255)
    phone_number: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=1)
    # Compared by the auth service so a mismatch never reaches the backend
    confirm_password: str


class LoginResponse(BaseModel):
    success: bool
    message: str
    redirect_to: Optional[str] = None
    user: Optional[Dict[str, Any]] = None


class SignupResponse(BaseModel):
    """Either a submitted application or the duplicate-account prompt"""
    outcome: str
    title: str
    message: str
    redirect_to: Optional[str] = None
    email: Optional[str] = None


class ApplicationStatusView(BaseModel):
    found: bool
    status: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    next_path: Optional[str] = None


class SessionView(BaseModel):
    source: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
    redirect_to: Optional[str] = None


# ============================================================================
# Case Schemas
# ============================================================================

class CaseBase(BaseModel):
    case_name: str = Field(..., min_length=1)
    case_no: int
    case_year: int = Field(default_factory=_current_year)
    name: str = ""
    society: str = ""
    lawyer: str = ""
    represents: PartyRole = PartyRole.none
    status: CaseStatus = CaseStatus.open


class CaseCreate(CaseBase):
    pass


class CaseUpdate(CaseBase):
    """Full form resubmission, as the edit modal sends it"""
    pass


class CaseRecord(HostedRow):
    case_name: Optional[str] = None
    case_no: Any = None
    case_year: Any = None
    name: Optional[str] = None
    society: Optional[str] = None
    lawyer: Optional[str] = None
    represents: Optional[str] = None
    status: Optional[str] = None


class SocietyStats(BaseModel):
    name: str
    count: int


# ============================================================================
# Court Record Schemas
# ============================================================================

class InterimOrderCreate(BaseModel):
    case_name: str = INTERIM_ORDER_CASE_NAMES[0]
    case_no: int
    case_year: int = Field(default_factory=_current_year)
    undated_text: Optional[str] = None
    next_date: Optional[dt.date] = None
    order_date: Optional[dt.date] = None

    @field_validator("undated_text", "next_date", "order_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class InterimOrder(HostedRow):
    case_name: Optional[str] = None
    case_no: Any = None
    case_year: Any = None
    undated_text: Optional[str] = None
    next_date: Optional[str] = None
    order_date: Optional[str] = None


class JudgmentCreate(BaseModel):
    case_name: str = Field(..., min_length=1)
    case_no: str = Field(..., min_length=1)
    case_year: str = Field(default_factory=_current_year_str)
    judge_name: str = ""
    judgment_date: dt.date = Field(default_factory=dt.date.today)
    description: str = ""


class Judgment(HostedRow):
    case_name: Optional[str] = None
    case_no: Any = None
    case_year: Any = None
    judge_name: Optional[str] = None
    judgment_date: Optional[str] = None
    description: Optional[str] = None
    file_url: Optional[str] = None


class CaseCopyCreate(BaseModel):
    case_name: str = Field(..., min_length=1)
    case_no: str = Field(..., min_length=1)
    case_year: str = Field(default_factory=_current_year_str)
    doctype: str = Field(..., min_length=1)
    date: dt.date = Field(default_factory=dt.date.today)


class CaseCopy(HostedRow):
    case_name: Optional[str] = None
    case_no: Any = None
    case_year: Any = None
    doctype: Optional[str] = None
    date: Optional[str] = None


# ============================================================================
# Finance Schemas
# ============================================================================

class TransactionCreate(BaseModel):
    category: str = Field(..., min_length=1)
    amount: float
    date: dt.date = Field(default_factory=dt.date.today)
    description: str = ""
    reference_number: str = ""
    payment_method: str = PAYMENT_METHODS[0]


class Transaction(HostedRow):
    type: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[str] = None
    description: Optional[str] = None
    reference_number: Optional[str] = None
    payment_method: Optional[str] = None


# ============================================================================
# Support Schemas
# ============================================================================

class SupportRequestCreate(BaseModel):
    type: TicketType = TicketType.feature_request
    priority: TicketPriority = TicketPriority.medium
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class SupportTicket(HostedRow):
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    type: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    admin_response: Optional[str] = None


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class TicketReply(BaseModel):
    response_text: str


class Release(HostedRow):
    version: Optional[str] = None
    title: Optional[str] = None
    notes: Optional[str] = None


# ============================================================================
# Admin Schemas
# ============================================================================

class ClerkUser(HostedRow):
    email: Optional[str] = None
    full_name: Optional[str] = None
    employee_id: Optional[str] = None
    phone_number: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


# ============================================================================
# List envelopes
# ============================================================================

RowT = TypeVar("RowT")


class ListResponse(BaseModel, Generic[RowT]):
    """List view state: a failed read keeps the items it had and sets ``error``"""
    items: List[RowT] = []
    error: Optional[str] = None


class CaseListResponse(ListResponse[CaseRecord]):
    status_counts: Dict[str, int] = {}


class TransactionListResponse(ListResponse[Transaction]):
    total: float = 0.0


class CaseNameOptions(BaseModel):
    names: List[str] = []
    error: Optional[str] = None


# ============================================================================
# Dashboard Schemas
# ============================================================================

class DashboardStats(BaseModel):
    """Display strings; a metric whose query failed reads '0'"""
    active_cases: str
    societies: str
    upcoming_hearings: str
    total_judgments: str
