"""User management routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from league.models import User
from league.models.base import get_async_session
from league.schemas import RoleResponse, RoleUpdate, UserResponse
from league.services import InvalidReference, users
from web.auth import require_admin_user, require_user

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    admin: User = Depends(require_admin_user),
    session: AsyncSession = Depends(get_async_session),
):
    """List all users (admin only)."""
    return await users.list_users(session)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    found = await users.get_user(session, user_id)
    if not found:
        raise HTTPException(404, "User not found")
    return found


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    body: RoleUpdate,
    admin: User = Depends(require_admin_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Change a user's role (admin only). roleId null makes them a plain player."""
    try:
        updated = await users.update_user_role(session, user_id, body.role_id)
    except InvalidReference as e:
        raise HTTPException(400, str(e))
    if not updated:
        raise HTTPException(404, "User not found")
    return updated


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await users.list_roles(session)
