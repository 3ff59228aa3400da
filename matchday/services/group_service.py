"""
Group service with business logic for group management.

Creates groups seeded from the football data API: team information,
team statistics and league standings are embedded in the group, and the
team's next game in that league is stored as a Game linked to the group.
"""

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from matchday.clients.football_api import FootballApiClient
from matchday.config.settings import FootballApiSettings
from matchday.errors import MatchdayError, NotFoundError
from matchday.mappers.games import find_upcoming_game
from matchday.mappers.groups import build_followed_team
from matchday.models.game import Game
from matchday.models.group import Group, GroupCreate
from matchday.repositories.game_repository import GameRepository
from matchday.repositories.group_repository import GroupRepository

logger = structlog.get_logger(__name__)


class GroupServiceError(MatchdayError):
    """Base exception for group service errors."""


class GroupNotFoundError(GroupServiceError, NotFoundError):
    """Raised when a group is not found."""


class ExternalDataNotFoundError(GroupServiceError, NotFoundError):
    """Raised when the football data API has no data for the requested team/league/season."""


class UpcomingGameError(GroupServiceError):
    """Raised when the upcoming game of a new group cannot be fetched or stored."""


class GroupService:
    """
    Service layer for group operations.

    Usage:
        db = await get_database()
        service = GroupService(db, football_api)
        group = await service.create_group(GroupCreate(...))
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        football_api: FootballApiClient,
        settings: FootballApiSettings | None = None,
    ) -> None:
        """
        Initialize group service.

        Args:
            database: Motor database instance
            football_api: Client for the football data API
            settings: Football API settings (defaults to the client's)
        """
        self.db = database
        self.football_api = football_api
        self.settings = settings or football_api.settings
        self.group_repo = GroupRepository(database)
        self.game_repo = GameRepository(database)

    async def get_group(self, group_id: str | ObjectId) -> Group:
        """
        Get group by ID.

        Raises:
            GroupNotFoundError: If group not found
        """
        group = await self.group_repo.get_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(f"Group with ID '{group_id}' not found")
        return group

    async def create_group(self, data: GroupCreate) -> Group:
        """
        Create a group following one team in one league and season.

        The three API fetches run one after another. If any of them has no
        results nothing is written. Once the group is stored, a failure while
        fetching or storing its upcoming game is logged and raised; the group
        is kept as it is.

        Returns:
            The group, with its upcoming game linked

        Raises:
            ExternalDataNotFoundError: If team, statistics or standings are empty
            UpcomingGameError: If the upcoming game could not be created
        """
        log = logger.bind(team=data.team, league=data.league, season=data.season)

        log.info("Fetching team information from the API")
        team_response = await self.football_api.get_team(
            team=data.team, league=data.league, season=data.season
        )
        if team_response.is_empty:
            log.error("Team response contains 0 results")
            raise ExternalDataNotFoundError(
                "Team information not found. Make sure the request body contains correct values."
            )

        log.info("Fetching team statistics from the API")
        statistics_response = await self.football_api.get_team_statistics(
            team=data.team, league=data.league, season=data.season
        )
        if statistics_response.is_empty:
            log.error("Team statistics response contains 0 results")
            raise ExternalDataNotFoundError(
                "Team statistics not found. Make sure the request body contains correct values."
            )

        log.info("Fetching competition standings from the API")
        standings_response = await self.football_api.get_standings(
            league=data.league, season=data.season
        )
        if standings_response.is_empty:
            log.error("Competition standings response contains 0 results")
            raise ExternalDataNotFoundError(
                "Team competition standings not found. "
                "Make sure the request body contains correct values."
            )

        team = team_response.first()["team"]
        followed_team = build_followed_team(
            team=team,
            competition=standings_response.first(),
            statistics=statistics_response.response,
            league_id=data.league,
            season=data.season,
        )

        log.info("Data fetched, creating group document")
        group = await self.group_repo.create(
            Group(
                name=data.name,
                email=data.email,
                website=data.website,
                followed_teams=[followed_team],
            )
        )

        try:
            game = await self._create_upcoming_game(group, data)
        except Exception as e:
            log.error(
                "Failed to create an upcoming game for the group",
                group_id=str(group.id),
                error=str(e),
            )
            raise UpcomingGameError(
                f"Couldn't create an upcoming game for group {group.id}: {e}"
            ) from e

        updated = await self.group_repo.add_upcoming_game(
            group.id,
            game.id,
            team_api_id=data.team,
            season=data.season,
            competition_api_id=data.league,
        )
        if updated is None:
            raise UpcomingGameError(f"Group {group.id} disappeared while linking its game")

        log.info("Group created", group_id=str(updated.id), name=updated.name)
        return updated

    async def _create_upcoming_game(self, group: Group, data: GroupCreate) -> Game:
        logger.info("Fetching an upcoming game for the group", group_id=str(group.id))
        fixtures = await self.football_api.get_fixtures(
            team=data.team, next=self.settings.upcoming_fixtures
        )
        game = find_upcoming_game(fixtures.items(), data.team, [data.league])
        # The group id is not known from the API
        game.group_id = group.id
        return await self.game_repo.create(game)
