"""API routes for teams, matches and games."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from league.models import User
from league.models.base import get_async_session
from league.schemas import (
    GameCreate,
    GameResponse,
    MatchCreate,
    MatchResponse,
    MatchScoreUpdate,
    TeamCreate,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMembershipResponse,
    TeamResponse,
)
from league.services import InvalidReference, matches, teams
from web.auth import require_user

router = APIRouter(prefix="/api", tags=["league"])


# --- Teams ---


@router.get("/teams", response_model=list[TeamResponse])
async def list_teams(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """List all teams by name."""
    return await teams.list_teams(session)


@router.post("/teams", response_model=TeamResponse, status_code=201)
async def create_team(
    body: TeamCreate,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await teams.create_team(session, body.name, body.venue, body.division)


@router.get("/teams/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    team = await teams.get_team(session, team_id)
    if not team:
        raise HTTPException(404, "Team not found")
    return team


@router.get("/teams/{team_id}/members", response_model=list[TeamMemberResponse])
async def list_team_members(
    team_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Team roster with captain flags, captains first."""
    return await teams.list_team_members(session, team_id)


@router.post("/teams/{team_id}/members", response_model=TeamMembershipResponse, status_code=201)
async def add_team_member(
    team_id: int,
    body: TeamMemberCreate,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Add a user to a team. Adding an existing member just updates the captain flag."""
    try:
        return await teams.add_team_member(session, team_id, body.user_id, body.is_captain)
    except InvalidReference as e:
        raise HTTPException(400, str(e))


@router.delete("/teams/{team_id}/members/{user_id}")
async def remove_team_member(
    team_id: int,
    user_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    if not await teams.remove_team_member(session, team_id, user_id):
        raise HTTPException(404, "Team member not found")
    return {"success": True}


@router.get("/teams/{team_id}/matches", response_model=list[MatchResponse])
async def list_team_matches(
    team_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await matches.list_team_matches(session, team_id)


# --- Current user ---


@router.get("/user/teams", response_model=list[TeamResponse])
async def list_my_teams(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await teams.list_user_teams(session, user.id)


@router.get("/user/matches", response_model=list[MatchResponse])
async def list_my_matches(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Fixtures of every team the caller plays for."""
    return await matches.list_user_matches(session, user.id)


# --- Matches ---


@router.get("/matches", response_model=list[MatchResponse])
async def list_matches(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await matches.list_matches(session)


@router.post("/matches", response_model=MatchResponse, status_code=201)
async def create_match(
    body: MatchCreate,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Schedule a match. Response includes both team names."""
    if body.home_team_id == body.away_team_id:
        raise HTTPException(400, "Home team and away team must be different")
    try:
        return await matches.create_match(
            session,
            date=body.date,
            home_team_id=body.home_team_id,
            away_team_id=body.away_team_id,
            venue=body.venue,
            created_by=user.id,
            status=body.status,
        )
    except InvalidReference as e:
        raise HTTPException(400, str(e))


@router.get("/matches/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    match = await matches.get_match(session, match_id)
    if not match:
        raise HTTPException(404, "Match not found")
    return match


@router.put("/matches/{match_id}/score", response_model=MatchResponse)
async def update_match_score(
    match_id: int,
    body: MatchScoreUpdate,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Record the final (or running) score. Status defaults to completed."""
    match = await matches.update_match_score(
        session, match_id, body.home_score, body.away_score, body.status
    )
    if not match:
        raise HTTPException(404, "Match not found")
    return match


@router.get("/matches/{match_id}/games", response_model=list[GameResponse])
async def list_games(
    match_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await matches.list_games(session, match_id)


@router.post("/matches/{match_id}/games", response_model=GameResponse, status_code=201)
async def add_game(
    match_id: int,
    body: GameCreate,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    try:
        return await matches.add_game(
            session,
            match_id=match_id,
            home_player_id=body.home_player_id,
            away_player_id=body.away_player_id,
            game_number=body.game_number,
            game_type=body.game_type,
            winner_id=body.winner_id,
        )
    except InvalidReference as e:
        raise HTTPException(400, str(e))
