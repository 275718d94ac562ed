"""Team and membership data access."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from league.models import Team, TeamMembership, User
from league.schemas import TeamMemberResponse, TeamMembershipResponse, TeamResponse
from league.services import InvalidReference


async def list_teams(session: AsyncSession) -> list[TeamResponse]:
    result = await session.execute(select(Team).order_by(Team.name, Team.id))
    return [TeamResponse.model_validate(t) for t in result.scalars().all()]


async def get_team(session: AsyncSession, team_id: int) -> Optional[TeamResponse]:
    team = await session.get(Team, team_id)
    return TeamResponse.model_validate(team) if team else None


async def create_team(
    session: AsyncSession, name: str, venue: Optional[str] = None, division: Optional[str] = None
) -> TeamResponse:
    team = Team(name=name, venue=venue, division=division)
    session.add(team)
    await session.commit()
    await session.refresh(team)
    return TeamResponse.model_validate(team)


def _insert_for(session: AsyncSession):
    """Dialect-specific INSERT so we can use ON CONFLICT."""
    if session.get_bind().dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


async def add_team_member(
    session: AsyncSession, team_id: int, user_id: int, is_captain: bool = False
) -> TeamMembershipResponse:
    """Add a user to a team. Re-adding only overwrites the captain flag."""
    insert = _insert_for(session)
    stmt = insert(TeamMembership).values(team_id=team_id, user_id=user_id, is_captain=is_captain)
    stmt = stmt.on_conflict_do_update(
        index_elements=[TeamMembership.team_id, TeamMembership.user_id],
        set_={"is_captain": stmt.excluded.is_captain},
    )
    try:
        await session.execute(stmt)
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise InvalidReference("Unknown team or user") from e
    return TeamMembershipResponse(team_id=team_id, user_id=user_id, is_captain=is_captain)


async def remove_team_member(session: AsyncSession, team_id: int, user_id: int) -> bool:
    result = await session.execute(
        delete(TeamMembership).where(
            TeamMembership.team_id == team_id,
            TeamMembership.user_id == user_id,
        )
    )
    await session.commit()
    return result.rowcount > 0


async def list_team_members(session: AsyncSession, team_id: int) -> list[TeamMemberResponse]:
    """Members of a team, captains first."""
    result = await session.execute(
        select(User.id, User.display_name, User.email, TeamMembership.is_captain)
        .join(TeamMembership, TeamMembership.user_id == User.id)
        .where(TeamMembership.team_id == team_id)
        .order_by(TeamMembership.is_captain.desc(), User.display_name)
    )
    return [
        TeamMemberResponse(id=row.id, display_name=row.display_name, email=row.email, is_captain=row.is_captain)
        for row in result.all()
    ]


async def list_user_teams(session: AsyncSession, user_id: int) -> list[TeamResponse]:
    result = await session.execute(
        select(Team)
        .join(TeamMembership, TeamMembership.team_id == Team.id)
        .where(TeamMembership.user_id == user_id)
        .order_by(Team.name)
    )
    return [TeamResponse.model_validate(t) for t in result.scalars().all()]
