"""Auth routes: Google sign-in redirect flow, session status, logout."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

import config
from league.models import User
from league.models.base import get_async_session
from league.schemas import AuthStatusResponse, AuthUser, LogoutResponse
from league.services import identity
from league.services.google_oauth import (
    GoogleOAuthClient,
    OAuthError,
    create_state,
    get_google_client,
    verify_state,
)
from web.auth import (
    clear_session_cookie,
    get_current_user,
    get_session_token,
    require_user,
    set_session_cookie,
)

logger = logging.getLogger("poolleague.auth")

router = APIRouter(tags=["auth"])


@router.get("/auth/google")
async def google_login(google: GoogleOAuthClient = Depends(get_google_client)):
    """Start Google sign-in."""
    return RedirectResponse(google.authorization_url(create_state()), status_code=302)


@router.get("/auth/google/callback")
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    google: GoogleOAuthClient = Depends(get_google_client),
    session: AsyncSession = Depends(get_async_session),
):
    """Google redirects here. Exchange the code, find or create the user, start a session."""
    failure = RedirectResponse("/auth/failure", status_code=302)
    if error or not code:
        logger.warning("Google sign-in cancelled or failed: %s", error or "no code")
        return failure
    if not verify_state(state):
        logger.warning("Google callback with invalid state")
        return failure
    try:
        assertion = await google.fetch_identity(code)
    except OAuthError as e:
        logger.error("Google identity exchange failed: %s", e)
        return failure

    logger.info("Google profile received: %s %s", assertion.subject, assertion.display_name)
    user = await identity.find_or_create_user(session, assertion)
    token = await identity.create_session(session, user.id)
    response = RedirectResponse(config.CLIENT_BASE_URL or "/", status_code=302)
    set_session_cookie(response, token)
    logger.info("Successfully authenticated: %s", user.display_name)
    return response


@router.get("/auth/failure")
async def auth_failure():
    return JSONResponse(status_code=401, content={"success": False, "message": "Authentication failed"})


@router.get("/api/auth/status", response_model=AuthStatusResponse)
async def auth_status(user: Optional[User] = Depends(get_current_user)):
    """Who is logged in. 401 with user=null when nobody is."""
    if not user:
        body = AuthStatusResponse(authenticated=False, user=None)
        return JSONResponse(status_code=401, content=body.model_dump(mode="json", by_alias=True))
    return AuthStatusResponse(
        authenticated=True,
        user=AuthUser(
            id=user.id,
            display_name=user.display_name,
            email=user.email,
            google_id=user.google_id,
            created_at=user.created_at,
            role_name=user.role_name,
        ),
    )


@router.get("/api/auth/logout", response_model=LogoutResponse)
async def logout(
    user: User = Depends(require_user),
    token: Optional[str] = Depends(get_session_token),
    session: AsyncSession = Depends(get_async_session),
):
    """End the current session."""
    await identity.delete_session(session, token)
    logger.info("Logged out: %s", user.display_name)
    body = LogoutResponse(success=True, message="Logged out successfully")
    response = JSONResponse(content=body.model_dump(mode="json", by_alias=True))
    clear_session_cookie(response)
    return response
