"""
Map API-Football standings, team and statistics payloads to group documents.

All functions are pure: they take decoded JSON and return models.
"""

from typing import Any

from matchday.models.game import TeamInfo
from matchday.models.group import (
    Competition,
    FixtureStatistics,
    FollowedTeam,
    Season,
    Standing,
    StatSplit,
    Streak,
    TeamStatistics,
)


def map_team(team: dict[str, Any]) -> TeamInfo:
    return TeamInfo(api_id=team["id"], name=team["name"], logo=team.get("logo"))


def _split(data: dict[str, Any] | None) -> StatSplit:
    data = data or {}
    return StatSplit(
        home=data.get("home") or 0,
        away=data.get("away") or 0,
        total=data.get("total") or 0,
    )


def _to_float(value: Any) -> float:
    # Averages arrive as strings ("1.6")
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def map_standings(competition: dict[str, Any]) -> list[Standing]:
    """
    Flatten the league tables of a `/standings` response item.

    Cup competitions have one table per group; their rows are kept in the
    order the API returns them, each tagged with its `group`.

    Args:
        competition: One item of the `/standings` `response` array

    Returns:
        Standing rows
    """
    tables = competition.get("league", {}).get("standings") or []
    standings: list[Standing] = []

    for table in tables:
        for row in table:
            totals = row.get("all") or {}
            goals = totals.get("goals") or {}
            standings.append(
                Standing(
                    rank=row["rank"],
                    team=map_team(row["team"]),
                    points=row.get("points") or 0,
                    goals_diff=row.get("goalsDiff") or 0,
                    group=row.get("group"),
                    form=row.get("form"),
                    status=row.get("status"),
                    description=row.get("description"),
                    played=totals.get("played") or 0,
                    win=totals.get("win") or 0,
                    draw=totals.get("draw") or 0,
                    lose=totals.get("lose") or 0,
                    goals_for=goals.get("for") or 0,
                    goals_against=goals.get("against") or 0,
                )
            )

    return standings


def map_team_statistics(statistics: dict[str, Any] | list[dict[str, Any]]) -> TeamStatistics:
    """
    Map a `/teams/statistics` payload to TeamStatistics.

    The endpoint returns a single object as `response`; a one-item list is
    accepted as well.
    """
    if isinstance(statistics, list):
        statistics = statistics[0] if statistics else {}

    fixtures = statistics.get("fixtures") or {}
    goals = statistics.get("goals") or {}
    goals_for = goals.get("for") or {}
    goals_against = goals.get("against") or {}
    streak = (statistics.get("biggest") or {}).get("streak") or {}

    return TeamStatistics(
        form=statistics.get("form"),
        fixtures=FixtureStatistics(
            played=_split(fixtures.get("played")),
            wins=_split(fixtures.get("wins")),
            draws=_split(fixtures.get("draws")),
            loses=_split(fixtures.get("loses")),
        ),
        goals_for=_split(goals_for.get("total")),
        goals_against=_split(goals_against.get("total")),
        average_goals_for=_to_float((goals_for.get("average") or {}).get("total")),
        average_goals_against=_to_float((goals_against.get("average") or {}).get("total")),
        clean_sheets=_split(statistics.get("clean_sheet")),
        failed_to_score=_split(statistics.get("failed_to_score")),
        biggest_streak=Streak(
            wins=streak.get("wins") or 0,
            draws=streak.get("draws") or 0,
            loses=streak.get("loses") or 0,
        ),
    )


def build_followed_team(
    team: dict[str, Any],
    competition: dict[str, Any],
    statistics: dict[str, Any] | list[dict[str, Any]],
    league_id: int,
    season: int,
) -> FollowedTeam:
    """
    Build the followed team of a new group.

    Args:
        team: `team` object of a `/teams` response item
        competition: One item of the `/standings` response
        statistics: `/teams/statistics` response payload
        league_id: League the data was fetched for
        season: Season the data was fetched for
    """
    league = competition.get("league") or {}
    return FollowedTeam(
        api_id=team["id"],
        name=team["name"],
        logo=team.get("logo"),
        seasons=[
            Season(
                season=season,
                competitions=[
                    Competition(
                        api_id=league_id,
                        name=league.get("name") or str(league_id),
                        logo=league.get("logo"),
                        standings=map_standings(competition),
                        team_statistics=map_team_statistics(statistics),
                    )
                ],
            )
        ],
    )
