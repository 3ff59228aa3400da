"""Repository for Game documents: the fixtures copied into each group."""

from matchday.models.game import Game
from matchday.repositories.base import BaseRepository


class GameRepository(BaseRepository[Game]):
    """
    Repository for Game document operations.

    Games are only created and read by id; the (api_id, group_id) unique
    index keeps one copy of a fixture per group.
    """

    collection_name = "games"
    model_class = Game
