"""Authentication for web API: session cookie lookup and role checks."""
from __future__ import annotations

from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

import config
from league.models import User
from league.models.base import get_async_session
from league.services import identity


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=config.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


async def get_session_token(
    token: Optional[str] = Cookie(None, alias=config.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return token


async def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    session: AsyncSession = Depends(get_async_session),
) -> Optional[User]:
    """Return the user behind the session cookie, or None if not logged in."""
    return await identity.resolve_session(session, token)


async def require_user(
    user: Optional[User] = Depends(get_current_user),
) -> User:
    """Require authenticated user. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def is_admin(user: User) -> bool:
    return user.role_name == config.ADMIN_ROLE_NAME


def require_admin(user: User) -> User:
    """Require admin role. Raises 403 if insufficient."""
    if not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return user


async def require_admin_user(
    user: User = Depends(require_user),
) -> User:
    """Dependency: require logged-in admin."""
    return require_admin(user)
