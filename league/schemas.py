"""Request bodies and response DTOs. JSON keys are camelCase."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MatchStatus = Literal["scheduled", "in_progress", "completed"]


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    # Stored values are naive UTC.
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


# --- Identity ---


class IdentityAssertion(Schema):
    """What Google tells us about the person who just signed in."""

    subject: str
    email: Optional[str] = None
    display_name: str


class AuthUser(Schema):
    id: int
    display_name: str
    email: Optional[str]
    google_id: str
    created_at: Optional[datetime]
    # The web client reads these two keys in snake_case.
    role_name: Optional[str] = Field(default=None, alias="role_name")


class AuthStatusResponse(Schema):
    authenticated: bool
    user: Optional[AuthUser]


class LogoutResponse(Schema):
    success: bool
    message: str


# --- Users ---


class RoleResponse(Schema):
    id: int
    name: str


class UserResponse(Schema):
    id: int
    google_id: str
    email: Optional[str]
    display_name: str
    role_id: Optional[int] = Field(alias="role_id")
    role_name: Optional[str] = Field(alias="role_name")
    created_at: Optional[datetime]


class RoleUpdate(Schema):
    role_id: Optional[int]


# --- Teams ---


class TeamCreate(Schema):
    name: str = Field(max_length=128)
    venue: Optional[str] = Field(default=None, max_length=255)
    division: Optional[str] = Field(default=None, max_length=64)

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _required_text(v)


class TeamResponse(Schema):
    id: int
    name: str
    venue: Optional[str]
    division: Optional[str]
    created_at: Optional[datetime]


class TeamMemberCreate(Schema):
    user_id: int
    is_captain: bool = False


class TeamMembershipResponse(Schema):
    team_id: int
    user_id: int
    is_captain: bool


class TeamMemberResponse(Schema):
    id: int
    display_name: str
    email: Optional[str]
    is_captain: bool


# --- Matches ---


class MatchCreate(Schema):
    date: datetime
    home_team_id: int
    away_team_id: int
    venue: str = Field(max_length=255)
    status: MatchStatus = "scheduled"

    @field_validator("venue")
    @classmethod
    def venue_required(cls, v: str) -> str:
        return _required_text(v)


class MatchScoreUpdate(Schema):
    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)
    status: MatchStatus = "completed"


class MatchResponse(Schema):
    id: int
    date: datetime
    home_team_id: int
    home_team_name: str
    away_team_id: int
    away_team_name: str
    venue: str
    status: str
    home_score: Optional[int]
    away_score: Optional[int]
    created_by: Optional[int]
    created_by_name: Optional[str] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def mark_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)


# --- Games ---


class GameCreate(Schema):
    home_player_id: int
    away_player_id: int
    winner_id: Optional[int] = None
    game_number: int = Field(ge=1)
    game_type: str = Field(max_length=64)

    @field_validator("game_type")
    @classmethod
    def game_type_required(cls, v: str) -> str:
        return _required_text(v)


class GameResponse(Schema):
    id: int
    match_id: int
    home_player_id: int
    home_player_name: Optional[str] = None
    away_player_id: int
    away_player_name: Optional[str] = None
    winner_id: Optional[int]
    winner_name: Optional[str] = None
    game_number: int
    game_type: str
    created_at: Optional[datetime]
