"""
Clerk and admin authentication

Clerks sign in through the ``clerk_login`` procedure (local fallback session)
or through hosted auth (hosted session). Applications are written straight
into ``clerk_users`` and wait there for an administrator. The admin console
has its own procedure and its own marker.

Cookie writes are left to the endpoints; this module only talks to the
hosted service.
"""
from typing import Any, Dict, Optional

from clerkdesk.core.config import settings
from clerkdesk.core.logger import logger
from clerkdesk.core.session import HostedSession, Session
from clerkdesk.db.backend import BackendError, HostedBackend
from clerkdesk.db.models import ClerkRole, ClerkStatus, Collection, Rpc
from clerkdesk.db.schemas import SignupRequest
from clerkdesk.utils.exceptions import (
    BackendCallError,
    InvalidCredentialsError,
    PasswordMismatchError,
)
from clerkdesk.utils.helpers import generate_employee_id, generate_uuid

LOGIN_FAILED = "Login failed. Please check credentials."
UNEXPECTED_ERROR = "An unexpected error occurred"
INVALID_ADMIN = "Invalid admin credentials"
SUBMISSION_FAILED = "Application submission failed. Please try again."
ALREADY_REGISTERED = (
    "This email is associated with an existing account. "
    "Please log in or check your application status."
)
RATE_LIMITED = (
    "Sign up rate limit exceeded. Please wait a while before trying again, "
    "or use a different email address."
)
SIGNUP_FAILED = "An error occurred during sign up. Please try again."

# (title, message, next path) per stored status
STATUS_VIEWS = {
    ClerkStatus.application_submitted.value: (
        "Application Under Review",
        "Your application has been received and is currently being reviewed by our "
        "administrative team. You will receive an update once the process is complete.",
        None,
    ),
    ClerkStatus.approved.value: (
        "Application Approved",
        "Congratulations! Your account has been approved and is ready for use.",
        settings.LOGIN_PATH,
    ),
    ClerkStatus.inactive.value: (
        "Account Inactive",
        "Your account is currently inactive or suspended. Please contact the "
        "administrator for assistance.",
        None,
    ),
}
STATUS_VIEWS[ClerkStatus.active.value] = STATUS_VIEWS[ClerkStatus.approved.value]
STATUS_VIEWS[ClerkStatus.suspended.value] = STATUS_VIEWS[ClerkStatus.inactive.value]

NOT_FOUND_VIEW = {
    "found": False,
    "status": None,
    "title": "Application Not Found",
    "message": "We couldn't find an application associated with this email address.",
    "next_path": None,
}


def map_signup_error(error: BackendError) -> str:
    """User-facing text for a hosted sign-up failure"""
    if "User already registered" in (error.message or "") or error.status == 422:
        return ALREADY_REGISTERED
    if error.status == 429:
        return RATE_LIMITED
    return error.message or SIGNUP_FAILED


def _status_value(data: Any) -> Optional[str]:
    # The procedure returns the bare status; tolerate a row-shaped answer too
    if isinstance(data, dict):
        data = data.get("status")
    if isinstance(data, list):
        data = data[0] if data else None
        return _status_value(data)
    return str(data) if data else None


class AuthService:

    def __init__(self, backend: HostedBackend):
        self.backend = backend

    # -- clerk login -------------------------------------------------------

    async def clerk_login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Returns the clerk row to persist as the local fallback session.
        Raises ``InvalidCredentialsError`` with the procedure's message.
        """
        data, error = await self.backend.rpc(
            Rpc.clerk_login,
            {"email_input": email, "password_input": password},
        )
        if error:
            logger.error("clerk_login call failed: %s", error.message)
            raise BackendCallError(error.message or UNEXPECTED_ERROR, error)

        if isinstance(data, dict) and data.get("success"):
            user = data.get("user") or {}
            logger.info("Clerk signed in", extra={"clerk_id": user.get("id")})
            return user

        message = data.get("message") if isinstance(data, dict) else None
        raise InvalidCredentialsError(message or LOGIN_FAILED)

    async def hosted_login(self, email: str, password: str) -> Dict[str, Any]:
        """Token payload from hosted password sign-in."""
        data, error = await self.backend.auth.sign_in_with_password(email, password)
        if error:
            logger.warning("Hosted sign-in refused: %s", error.message)
            raise InvalidCredentialsError(error.message or LOGIN_FAILED)
        return data or {}

    async def sign_out(self, session: Session) -> None:
        """Ends the hosted session only; the local fallback session is left in place."""
        if not isinstance(session, HostedSession):
            return
        _, error = await self.backend.auth.sign_out(session.access_token)
        if error:
            logger.warning("Hosted sign-out failed: %s", error.message)

    # -- applications ------------------------------------------------------

    async def submit_application(self, form: SignupRequest) -> Dict[str, Any]:
        if form.password != form.confirm_password:
            raise PasswordMismatchError()

        existing, _ = await self.backend.rpc(
            Rpc.get_application_status, {"email_input": form.email}
        )
        if existing:
            return {
                "outcome": "duplicate",
                "title": "Account Already Exists",
                "message": f"The email {form.email} is already registered.",
                "redirect_to": settings.STATUS_PATH,
                "email": form.email,
            }

        row = {
            "id": generate_uuid(),
            "email": form.email,
            "full_name": form.full_name,
            "employee_id": generate_employee_id(),
            "phone_number": form.phone_number,
            "password": form.password,
            "role": ClerkRole.clerk.value,
            "status": ClerkStatus.application_submitted.value,
        }

        if settings.SIGNUP_USE_HOSTED_AUTH:
            data, error = await self.backend.auth.sign_up(
                form.email, form.password, data={"full_name": form.full_name}
            )
            if error:
                logger.warning("Hosted sign-up failed: %s", error.message, extra={"status": error.status})
                raise BackendCallError(map_signup_error(error), error)
            user = (data or {}).get("user") or data or {}
            if user.get("id"):
                row["id"] = user["id"]
            # Credentials live in hosted auth
            row.pop("password")

        _, error = await self.backend.table(Collection.clerk_users).insert(row, returning=False).execute()
        if error:
            logger.error("Profile creation failed: %s", error.message, extra={"code": error.code})
            raise BackendCallError(SUBMISSION_FAILED, error)

        logger.info("Application submitted", extra={"employee_id": row["employee_id"]})
        return {
            "outcome": "submitted",
            "title": "Application Submitted",
            "message": "Your application has been submitted for review.",
            "redirect_to": settings.STATUS_PATH,
            "email": form.email,
        }

    async def application_status(self, email: str) -> Dict[str, Any]:
        """Status lookup. A failed call renders the same as no application."""
        data, error = await self.backend.rpc(Rpc.get_application_status, {"email_input": email})
        if error:
            logger.error("Error checking status: %s", error.message)
            return dict(NOT_FOUND_VIEW)

        status = _status_value(data)
        if status is None:
            return dict(NOT_FOUND_VIEW)

        title, message, next_path = STATUS_VIEWS.get(status, (None, None, None))
        return {
            "found": True,
            "status": status,
            "title": title,
            "message": message,
            "next_path": next_path,
        }

    # -- admin -------------------------------------------------------------

    async def admin_login(self, email: str, password: str) -> bool:
        data, error = await self.backend.rpc(
            Rpc.admin_login,
            {"email_input": email, "password_input": password},
        )
        if error:
            logger.error("admin_login call failed: %s", error.message)
            raise BackendCallError(error.message or "Login failed", error)
        if not data:
            raise InvalidCredentialsError(INVALID_ADMIN)
        return True
