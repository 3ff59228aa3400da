"""Pure transformations from football data API payloads to documents."""

from matchday.mappers.games import NoUpcomingGameError, find_upcoming_game, map_fixture
from matchday.mappers.groups import (
    build_followed_team,
    map_standings,
    map_team,
    map_team_statistics,
)

__all__ = [
    "NoUpcomingGameError",
    "build_followed_team",
    "find_upcoming_game",
    "map_fixture",
    "map_standings",
    "map_team",
    "map_team_statistics",
]
