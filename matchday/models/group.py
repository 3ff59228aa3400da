"""
Group model and its embedded competition data.

A group follows one or more teams. For every followed team it keeps, per
season, the competitions the team plays in together with the league table
and the team's statistics as fetched from the football data API.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from matchday.models.base import EmbeddedModel, TimestampedModel
from matchday.models.game import TeamInfo
from matchday.validators.custom_types import PyObjectId


class Standing(EmbeddedModel):
    """One row of a league table."""

    rank: int = Field(..., ge=1)
    team: TeamInfo
    points: int = 0
    goals_diff: int = 0
    group: str | None = Field(default=None, description="Table name, e.g. 'Premier League'")
    form: str | None = Field(default=None, description="Recent results, e.g. 'WWDLW'")
    status: str | None = None
    description: str | None = None
    played: int = Field(default=0, ge=0)
    win: int = Field(default=0, ge=0)
    draw: int = Field(default=0, ge=0)
    lose: int = Field(default=0, ge=0)
    goals_for: int = Field(default=0, ge=0)
    goals_against: int = Field(default=0, ge=0)


class StatSplit(EmbeddedModel):
    """A counter split by venue."""

    home: int = 0
    away: int = 0
    total: int = 0


class FixtureStatistics(EmbeddedModel):
    played: StatSplit = Field(default_factory=StatSplit)
    wins: StatSplit = Field(default_factory=StatSplit)
    draws: StatSplit = Field(default_factory=StatSplit)
    loses: StatSplit = Field(default_factory=StatSplit)


class Streak(EmbeddedModel):
    wins: int = 0
    draws: int = 0
    loses: int = 0


class TeamStatistics(EmbeddedModel):
    """Season statistics of a followed team in one competition."""

    form: str | None = None
    fixtures: FixtureStatistics = Field(default_factory=FixtureStatistics)
    goals_for: StatSplit = Field(default_factory=StatSplit)
    goals_against: StatSplit = Field(default_factory=StatSplit)
    average_goals_for: float = 0.0
    average_goals_against: float = 0.0
    clean_sheets: StatSplit = Field(default_factory=StatSplit)
    failed_to_score: StatSplit = Field(default_factory=StatSplit)
    biggest_streak: Streak = Field(default_factory=Streak)


class Competition(EmbeddedModel):
    """A competition a followed team plays in during one season."""

    api_id: int = Field(..., description="League id in the football data API")
    name: str
    logo: str | None = None
    games: list[PyObjectId] = Field(default_factory=list)
    players: list[int] = Field(default_factory=list, description="Player API ids")
    standings: list[Standing] = Field(default_factory=list)
    team_statistics: TeamStatistics | None = None


class Season(EmbeddedModel):
    season: int = Field(..., description="Season year, e.g. 2024")
    competitions: list[Competition] = Field(default_factory=list)


class FollowedTeam(EmbeddedModel):
    api_id: int = Field(..., description="Team id in the football data API")
    name: str
    logo: str | None = None
    seasons: list[Season] = Field(default_factory=list)


class GroupCreate(BaseModel):
    """Admin request for creating a group seeded from the football data API."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr | None = None
    website: str | None = Field(default=None, max_length=200)
    team: int = Field(..., description="API id of the team the group follows")
    league: int = Field(..., description="API id of the league to fetch data for")
    season: int = Field(..., ge=1900, le=2100, description="Season year")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        if v is not None:
            return v.lower().strip()
        return v


class Group(TimestampedModel):
    """
    Group document model.

    Indexes:
        - name
        - followed_teams.api_id: groups following a team
    """

    name: str = Field(..., min_length=1, max_length=100)
    email: str | None = None
    website: str | None = None
    followed_teams: list[FollowedTeam] = Field(default_factory=list)
    users: list[PyObjectId] = Field(default_factory=list)
    upcoming_games: list[PyObjectId] = Field(default_factory=list)
