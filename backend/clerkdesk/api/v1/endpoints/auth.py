"""
Clerk authentication endpoints: login, signup, application status, logout
"""
from fastapi import APIRouter, Depends, Query, Request, Response

from clerkdesk.api.deps import get_backend, public_only, require_session
from clerkdesk.core.config import settings
from clerkdesk.core.session import (
    HostedSession,
    Session,
    clear_hosted_session,
    read_hosted_cookie,
    write_hosted_session,
    write_local_session,
)
from clerkdesk.db import schemas
from clerkdesk.db.backend import HostedBackend
from clerkdesk.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    payload: schemas.LoginRequest,
    response: Response,
    _: Session = Depends(public_only),
    backend: HostedBackend = Depends(get_backend)
):
    """
    Clerk login through the clerk_login procedure. Stores the returned clerk
    row as the local fallback session.
    """
    user = await AuthService(backend).clerk_login(payload.email, payload.password)
    write_local_session(response, user)
    return {
        "success": True,
        "message": "Login successful",
        "redirect_to": settings.HOME_PATH,
        "user": user,
    }


@router.post("/hosted-login", response_model=schemas.LoginResponse)
async def hosted_login(
    payload: schemas.LoginRequest,
    response: Response,
    _: Session = Depends(public_only),
    backend: HostedBackend = Depends(get_backend)
):
    """Password sign-in against hosted auth."""
    data = await AuthService(backend).hosted_login(payload.email, payload.password)
    write_hosted_session(response, data)
    user = data.get("user") or {}
    return {
        "success": True,
        "message": "Login successful",
        "redirect_to": settings.HOME_PATH,
        "user": {"id": user.get("id"), "email": user.get("email")},
    }


@router.post("/signup", response_model=schemas.SignupResponse)
async def signup(
    payload: schemas.SignupRequest,
    _: Session = Depends(public_only),
    backend: HostedBackend = Depends(get_backend)
):
    return await AuthService(backend).submit_application(payload)


@router.get("/status", response_model=schemas.ApplicationStatusView)
async def application_status(
    email: str = Query(..., min_length=1),
    _: Session = Depends(public_only),
    backend: HostedBackend = Depends(get_backend)
):
    return await AuthService(backend).application_status(email.strip())


@router.post("/logout", response_model=schemas.MessageResponse)
async def logout(
    request: Request,
    response: Response,
    backend: HostedBackend = Depends(get_backend)
):
    """
    Ends the hosted session. The local fallback session cookie is not touched.
    """
    await AuthService(backend).sign_out(read_hosted_cookie(request))
    clear_hosted_session(response)
    return {"message": "Signed out", "redirect_to": settings.LOGIN_PATH}


@router.get("/session", response_model=schemas.SessionView)
async def current_session(session: Session = Depends(require_session)):
    if isinstance(session, HostedSession):
        return {
            "source": session.source.value,
            "user_id": session.user_id,
            "email": session.email,
        }
    return {
        "source": session.source.value,
        "user_id": session.id,
        "email": session.email,
        "full_name": session.full_name,
        "role": session.role,
        "status": session.status,
    }
