"""Database models."""
from league.models.base import Base, get_async_session, init_db
from league.models.user import Role, User
from league.models.team import Team, TeamMembership
from league.models.match import MATCH_STATUSES, Game, Match
from league.models.auth_session import AuthSession  # noqa: F401 - for metadata

__all__ = [
    "Base",
    "Role",
    "User",
    "Team",
    "TeamMembership",
    "Match",
    "Game",
    "MATCH_STATUSES",
    "AuthSession",
    "get_async_session",
    "init_db",
]
