"""Map API-Football fixtures to Game documents and pick a group's next game."""

from datetime import datetime
from typing import Any

from matchday.errors import NotFoundError
from matchday.mappers.groups import map_team
from matchday.models.base import utc_now
from matchday.models.game import Game

# Fixture statuses that still accept bets
NOT_STARTED_STATUSES = frozenset({"NS", "TBD"})


class NoUpcomingGameError(NotFoundError):
    """Raised when no fixture qualifies as the team's upcoming game."""


def map_fixture(item: dict[str, Any]) -> Game:
    """
    Map one `/fixtures` response item to an unsaved Game.

    The game's `group_id` is left unset; it is not known from the API.
    """
    fixture = item["fixture"]
    league = item.get("league") or {}
    teams = item["teams"]
    goals = item.get("goals") or {}
    venue = fixture.get("venue") or {}

    return Game(
        api_id=fixture["id"],
        competition_id=league["id"],
        competition_name=league.get("name"),
        season=league.get("season"),
        round=league.get("round"),
        date=fixture["date"],
        status=(fixture.get("status") or {}).get("short") or "NS",
        home_team=map_team(teams["home"]),
        away_team=map_team(teams["away"]),
        venue=venue.get("name"),
        goals_home=goals.get("home"),
        goals_away=goals.get("away"),
    )


def find_upcoming_game(
    fixtures: list[dict[str, Any]],
    team_id: int,
    competition_ids: list[int],
    now: datetime | None = None,
) -> Game:
    """
    Pick the earliest not-yet-started fixture of a team in the given competitions.

    Args:
        fixtures: `/fixtures` response items
        team_id: API id of the team
        competition_ids: League API ids the game must belong to
        now: Reference time (defaults to current UTC time)

    Raises:
        NoUpcomingGameError: If no fixture qualifies
    """
    now = now or utc_now()
    wanted = set(competition_ids)

    candidates = [
        game
        for game in map(map_fixture, fixtures)
        if game.competition_id in wanted
        and game.involves(team_id)
        and game.status in NOT_STARTED_STATUSES
        and game.date > now
    ]

    if not candidates:
        raise NoUpcomingGameError(
            f"No upcoming game found for team {team_id} in competitions {sorted(wanted)}"
        )

    return min(candidates, key=lambda game: game.date)
