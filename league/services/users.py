"""User data access."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from league.models import Role, User
from league.schemas import RoleResponse, UserResponse
from league.services import InvalidReference
from league.services.identity import get_user_by_id


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        google_id=user.google_id,
        email=user.email,
        display_name=user.display_name,
        role_id=user.role_id,
        role_name=user.role_name,
        created_at=user.created_at,
    )


async def list_users(session: AsyncSession) -> list[UserResponse]:
    result = await session.execute(select(User).order_by(User.display_name, User.id))
    return [_user_response(u) for u in result.scalars().all()]


async def get_user(session: AsyncSession, user_id: int) -> Optional[UserResponse]:
    user = await get_user_by_id(session, user_id)
    return _user_response(user) if user else None


async def update_user_role(
    session: AsyncSession, user_id: int, role_id: Optional[int]
) -> Optional[UserResponse]:
    """Set (or with None, clear) a user's role. None if the user does not exist."""
    user = await session.get(User, user_id)
    if not user:
        return None
    if role_id is not None and await session.get(Role, role_id) is None:
        raise InvalidReference("Invalid role")
    user.role_id = role_id
    await session.commit()
    return await get_user(session, user_id)


async def list_roles(session: AsyncSession) -> list[RoleResponse]:
    result = await session.execute(select(Role).order_by(Role.name))
    return [RoleResponse.model_validate(r) for r in result.scalars().all()]
