"""
Bet repository for database operations.

Provides async CRUD operations and queries for Bet documents.
"""

from matchday.models.bet import Bet, BetStatus
from matchday.repositories.base import BaseRepository, DocumentId
from matchday.validators.custom_types import to_object_id


class BetRepository(BaseRepository[Bet]):
    """Repository for Bet document operations."""

    collection_name = "bets"
    model_class = Bet

    async def find_by_user_and_game(self, user_id: DocumentId, game_id: DocumentId) -> Bet | None:
        """The bet a user placed on a game, if any."""
        return await self.find_one(
            {"user": to_object_id(user_id), "game": to_object_id(game_id)}
        )

    async def mark_evaluated(self, bet: Bet) -> Bet | None:
        """
        Persist an evaluated bet.

        The update only matches while the stored bet is still PENDING, so a
        bet can be evaluated once even when two evaluations race.

        Args:
            bet: Bet returned by `Bet.evaluate()`

        Returns:
            Updated Bet, or None if the bet is gone or no longer pending
        """
        return await self.update_by_id(
            bet.id,
            {"$set": {"status": BetStatus.EVALUATED.value, "points": bet.points}},
            extra_filter={"status": BetStatus.PENDING.value},
        )
