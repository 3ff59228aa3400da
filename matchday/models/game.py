"""
Game model for fixtures followed by a group.

A game is created from an API-Football fixture and linked to the group it
was fetched for. Users bet on games until kickoff.
"""

from datetime import datetime
from typing import Annotated

from pydantic import Field

from matchday.models.base import EmbeddedModel, TimestampedModel, utc_now
from matchday.validators.custom_types import PyObjectId

Score = Annotated[int, Field(ge=0, le=99)]


class TeamInfo(EmbeddedModel):
    """Team reference as returned by the football data API."""

    api_id: int = Field(..., description="Team id in the football data API")
    name: str = Field(..., min_length=1, max_length=100)
    logo: str | None = Field(default=None, description="Team logo URL")


class Game(TimestampedModel):
    """
    Game document model.

    Indexes:
        - (group_id, date): upcoming games of a group
        - (api_id, group_id): unique, one document per fixture per group
    """

    api_id: int = Field(..., description="Fixture id in the football data API")
    group_id: PyObjectId | None = Field(
        default=None,
        description="Group the game was fetched for (set after the group exists)",
    )
    competition_id: int = Field(..., description="League id in the football data API")
    competition_name: str | None = Field(default=None, max_length=100)
    season: int | None = Field(default=None, description="Season year")
    round: str | None = Field(default=None, max_length=100)
    date: datetime = Field(..., description="Kickoff time (UTC)")
    status: str = Field(default="NS", description="API short status, e.g. NS, FT, PST")

    home_team: TeamInfo
    away_team: TeamInfo
    venue: str | None = Field(default=None, max_length=200)

    goals_home: Score | None = Field(default=None, description="Final home goals")
    goals_away: Score | None = Field(default=None, description="Final away goals")

    def has_started(self, now: datetime | None = None) -> bool:
        """Whether kickoff is in the past."""
        return self.date <= (now or utc_now())

    def involves(self, team_api_id: int) -> bool:
        return team_api_id in (self.home_team.api_id, self.away_team.api_id)
