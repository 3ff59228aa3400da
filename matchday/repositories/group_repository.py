"""
Group repository for database operations.

Provides async CRUD operations and queries for Group documents.
"""

from bson import ObjectId

from matchday.models.group import Group
from matchday.repositories.base import BaseRepository, DocumentId


class GroupRepository(BaseRepository[Group]):
    """Repository for Group document operations."""

    collection_name = "groups"
    model_class = Group

    async def add_user(self, group_id: DocumentId, user_id: ObjectId) -> bool:
        """Append a member to the group."""
        return await self.push(group_id, "users", user_id)

    async def add_upcoming_game(
        self,
        group_id: DocumentId,
        game_id: ObjectId,
        *,
        team_api_id: int,
        season: int,
        competition_api_id: int,
    ) -> Group | None:
        """
        Link a game to the group.

        The id is appended to `upcoming_games` and to the `games` list of the
        matching competition of the followed team.

        Returns:
            Updated Group, or None if the group does not exist
        """
        return await self.update_by_id(
            group_id,
            {
                "$push": {
                    "upcoming_games": game_id,
                    "followed_teams.$[team].seasons.$[season].competitions.$[comp].games": game_id,
                }
            },
            array_filters=[
                {"team.api_id": team_api_id},
                {"season.season": season},
                {"comp.api_id": competition_api_id},
            ],
        )
