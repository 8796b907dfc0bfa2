"""
Custom exception classes
"""
from typing import Optional

from fastapi import HTTPException

from clerkdesk.db.backend import BackendError


class RedirectRequired(HTTPException):
    """Raised by a route guard to send the caller elsewhere"""
    def __init__(self, location: str):
        super().__init__(
            status_code=307,
            detail=f"Redirect to {location}",
            headers={"Location": location}
        )
        self.location = location


class BackendCallError(HTTPException):
    """Raised when a write to the hosted service fails; detail is the user-facing alert"""
    def __init__(self, message: str, error: Optional[BackendError] = None):
        super().__init__(
            status_code=502,
            detail=message
        )
        self.error = error


class PasswordMismatchError(HTTPException):
    """Raised when signup password and confirmation differ"""
    def __init__(self):
        super().__init__(
            status_code=400,
            detail="Passwords do not match"
        )


class EmptyReplyError(HTTPException):
    """Raised when an admin reply has no text"""
    def __init__(self):
        super().__init__(
            status_code=400,
            detail="Reply text is required"
        )


class InvalidCredentialsError(HTTPException):
    """Raised when a login is refused"""
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            status_code=401,
            detail=message
        )
