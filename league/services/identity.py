"""Identity exchange and server-side login sessions."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from league.models import AuthSession, Role, User
from league.schemas import IdentityAssertion

logger = logging.getLogger("poolleague.auth")


async def get_user_by_google_id(session: AsyncSession, google_id: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.google_id == google_id))
    return result.scalar_one_or_none()


async def _initial_role_id(session: AsyncSession, google_id: str) -> Optional[int]:
    """Admin role id for the configured bootstrap admin, else None (plain player)."""
    if not config.INITIAL_ADMIN_GOOGLE_ID or google_id != config.INITIAL_ADMIN_GOOGLE_ID:
        return None
    result = await session.execute(select(Role.id).where(Role.name == config.ADMIN_ROLE_NAME))
    return result.scalar_one_or_none()


async def find_or_create_user(session: AsyncSession, identity: IdentityAssertion) -> User:
    """Return the user for a Google subject, creating one on first login.

    google_id is unique, so if two first logins race the loser's insert fails
    and we return the row the winner created.
    """
    user = await get_user_by_google_id(session, identity.subject)
    if user:
        logger.info("User found: %s (ID: %s)", user.display_name, user.id)
        return user

    logger.info("User not found, creating new user: %s", identity.display_name)
    user = User(
        google_id=identity.subject,
        email=identity.email,
        display_name=identity.display_name,
        role_id=await _initial_role_id(session, identity.subject),
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        existing = await get_user_by_google_id(session, identity.subject)
        if existing is None:
            raise
        logger.info("Concurrent first login for %s; using existing user %s", identity.subject, existing.id)
        return existing
    # Reload so the role relationship is populated.
    user = await get_user_by_id(session, user.id)
    logger.info("User created: %s (ID: %s)", user.display_name, user.id)
    return user


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_session(session: AsyncSession, user_id: int) -> str:
    """Persist a new login session for user_id and return its cookie token."""
    now = datetime.utcnow()
    await session.execute(delete(AuthSession).where(AuthSession.expires_at <= now))
    token = secrets.token_urlsafe(32)
    session.add(
        AuthSession(
            token=token,
            user_id=user_id,
            expires_at=now + timedelta(days=config.SESSION_EXPIRE_DAYS),
        )
    )
    await session.commit()
    return token


async def resolve_session(session: AsyncSession, token: Optional[str]) -> Optional[User]:
    """Return the user behind a live session token, or None.

    Unknown, expired and orphaned tokens (user deleted) all mean "not logged in".
    """
    if not token:
        return None
    result = await session.execute(select(AuthSession).where(AuthSession.token == token))
    auth_session = result.scalar_one_or_none()
    if not auth_session:
        return None
    if auth_session.expires_at <= datetime.utcnow():
        await session.delete(auth_session)
        await session.commit()
        return None
    user = await get_user_by_id(session, auth_session.user_id)
    if not user:
        logger.warning("User with ID %s not found for session; treating as logged out", auth_session.user_id)
        return None
    return user


async def delete_session(session: AsyncSession, token: str) -> bool:
    result = await session.execute(delete(AuthSession).where(AuthSession.token == token))
    await session.commit()
    return result.rowcount > 0
