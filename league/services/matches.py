"""Match and game data access."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Select, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from league.models import Game, Match, Team, TeamMembership, User
from league.schemas import GameResponse, MatchResponse
from league.services import InvalidReference

HomeTeam = aliased(Team, name="home_team")
AwayTeam = aliased(Team, name="away_team")
Creator = aliased(User, name="creator")

HomePlayer = aliased(User, name="home_player")
AwayPlayer = aliased(User, name="away_player")
Winner = aliased(User, name="winner")


def _match_query() -> Select:
    """Matches with both team names and the creator's name joined on."""
    return (
        select(
            Match,
            HomeTeam.name.label("home_team_name"),
            AwayTeam.name.label("away_team_name"),
            Creator.display_name.label("created_by_name"),
        )
        .join(HomeTeam, Match.home_team_id == HomeTeam.id)
        .join(AwayTeam, Match.away_team_id == AwayTeam.id)
        .outerjoin(Creator, Match.created_by == Creator.id)
    )


def _match_response(
    match: Match,
    home_team_name: Optional[str],
    away_team_name: Optional[str],
    created_by_name: Optional[str] = None,
) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        date=match.date,
        home_team_id=match.home_team_id,
        home_team_name=home_team_name or "Unknown",
        away_team_id=match.away_team_id,
        away_team_name=away_team_name or "Unknown",
        venue=match.venue,
        status=match.status,
        home_score=match.home_score,
        away_score=match.away_score,
        created_by=match.created_by,
        created_by_name=created_by_name,
        created_at=match.created_at,
        updated_at=match.updated_at,
    )


async def _fetch_matches(session: AsyncSession, stmt: Select) -> list[MatchResponse]:
    result = await session.execute(stmt)
    return [_match_response(*row) for row in result.all()]


async def list_matches(session: AsyncSession) -> list[MatchResponse]:
    """All matches, newest first."""
    return await _fetch_matches(session, _match_query().order_by(Match.date.desc(), Match.id.desc()))


async def get_match(session: AsyncSession, match_id: int) -> Optional[MatchResponse]:
    matches = await _fetch_matches(session, _match_query().where(Match.id == match_id))
    return matches[0] if matches else None


async def list_team_matches(session: AsyncSession, team_id: int) -> list[MatchResponse]:
    stmt = (
        _match_query()
        .where(or_(Match.home_team_id == team_id, Match.away_team_id == team_id))
        .order_by(Match.date, Match.id)
    )
    return await _fetch_matches(session, stmt)


async def list_user_matches(session: AsyncSession, user_id: int) -> list[MatchResponse]:
    """Matches where the user belongs to either side, soonest first."""
    user_team_ids = select(TeamMembership.team_id).where(TeamMembership.user_id == user_id)
    stmt = (
        _match_query()
        .where(or_(Match.home_team_id.in_(user_team_ids), Match.away_team_id.in_(user_team_ids)))
        .order_by(Match.date, Match.id)
    )
    return await _fetch_matches(session, stmt)


async def create_match(
    session: AsyncSession,
    date: datetime,
    home_team_id: int,
    away_team_id: int,
    venue: str,
    created_by: Optional[int],
    status: str = "scheduled",
) -> MatchResponse:
    """Insert a match and return it with both team names."""
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc).replace(tzinfo=None)
    match = Match(
        date=date,
        home_team_id=home_team_id,
        away_team_id=away_team_id,
        venue=venue,
        status=status,
        created_by=created_by,
    )
    session.add(match)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise InvalidReference("Unknown home or away team") from e

    result = await session.execute(
        select(Team.id, Team.name).where(Team.id.in_([home_team_id, away_team_id]))
    )
    names = {row.id: row.name for row in result.all()}
    creator_name = None
    if created_by is not None:
        creator = await session.get(User, created_by)
        creator_name = creator.display_name if creator else None
    return _match_response(match, names.get(home_team_id), names.get(away_team_id), creator_name)


async def update_match_score(
    session: AsyncSession,
    match_id: int,
    home_score: int,
    away_score: int,
    status: str = "completed",
) -> Optional[MatchResponse]:
    match = await session.get(Match, match_id)
    if not match:
        return None
    match.home_score = home_score
    match.away_score = away_score
    match.status = status
    await session.commit()
    return await get_match(session, match_id)


async def add_game(
    session: AsyncSession,
    match_id: int,
    home_player_id: int,
    away_player_id: int,
    game_number: int,
    game_type: str,
    winner_id: Optional[int] = None,
) -> GameResponse:
    game = Game(
        match_id=match_id,
        home_player_id=home_player_id,
        away_player_id=away_player_id,
        winner_id=winner_id,
        game_number=game_number,
        game_type=game_type,
    )
    session.add(game)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise InvalidReference("Unknown match or player") from e
    await session.refresh(game)
    return GameResponse.model_validate(game)


async def list_games(session: AsyncSession, match_id: int) -> list[GameResponse]:
    """Games of a match in play order, with player names."""
    result = await session.execute(
        select(
            Game,
            HomePlayer.display_name.label("home_player_name"),
            AwayPlayer.display_name.label("away_player_name"),
            Winner.display_name.label("winner_name"),
        )
        .join(HomePlayer, Game.home_player_id == HomePlayer.id)
        .join(AwayPlayer, Game.away_player_id == AwayPlayer.id)
        .outerjoin(Winner, Game.winner_id == Winner.id)
        .where(Game.match_id == match_id)
        .order_by(Game.game_number, Game.id)
    )
    games = []
    for game, home_name, away_name, winner_name in result.all():
        dto = GameResponse.model_validate(game)
        dto.home_player_name = home_name
        dto.away_player_name = away_name
        dto.winner_name = winner_name
        games.append(dto)
    return games
