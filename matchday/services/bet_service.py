"""
Bet service.

Places bets on upcoming games and applies evaluations computed by the
scoring process.
"""

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from matchday.errors import ConflictError, InvalidRequestError, MatchdayError, NotFoundError
from matchday.models.bet import Bet, BetCreate, InvalidBetTransitionError
from matchday.models.user import User
from matchday.repositories.bet_repository import BetRepository
from matchday.repositories.game_repository import GameRepository
from matchday.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)


class BetServiceError(MatchdayError):
    """Base exception for bet service errors."""


class BetNotFoundError(BetServiceError, NotFoundError):
    """Raised when a bet is not found."""


class GameNotFoundError(BetServiceError, NotFoundError):
    """Raised when the game of a bet does not exist."""


class BetNotAllowedError(BetServiceError, InvalidRequestError):
    """Raised when a bet cannot be placed on a game."""

    code = "BET_NOT_ALLOWED"


class DuplicateBetError(BetServiceError, ConflictError):
    """Raised when the user already bet on the game."""


class BetService:
    """
    Service layer for bet operations.

    Usage:
        service = BetService(db)
        bet = await service.place_bet(user, BetCreate(game=game_id, ...))
        await service.evaluate_bet(bet.id, points=3)
    """

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self.db = database
        self.bet_repo = BetRepository(database)
        self.game_repo = GameRepository(database)
        self.user_repo = UserRepository(database)

    async def place_bet(self, user: User, data: BetCreate) -> Bet:
        """
        Place a bet on a game of the user's group.

        Raises:
            GameNotFoundError: If the game does not exist
            BetNotAllowedError: If the game is not the group's or already started
            DuplicateBetError: If the user already bet on the game
        """
        game = await self.game_repo.get_by_id(data.game)
        if game is None:
            raise GameNotFoundError(f"Game '{data.game}' not found")

        if game.group_id != user.group_id:
            raise BetNotAllowedError("The game doesn't belong to the user's group")

        if game.has_started():
            raise BetNotAllowedError("Bets are closed for a game that already started")

        if await self.bet_repo.find_by_user_and_game(user.id, game.id) is not None:
            raise DuplicateBetError("A bet for this game already exists")

        try:
            bet = await self.bet_repo.create(Bet.from_create(data, user.id))
        except DuplicateKeyError as e:
            raise DuplicateBetError("A bet for this game already exists") from e

        await self.user_repo.add_bet(user.id, bet.id)
        logger.info(
            "Bet placed",
            bet_id=str(bet.id),
            user_id=str(user.id),
            game_id=str(game.id),
        )
        return bet

    async def get_bet(self, bet_id: str | ObjectId) -> Bet:
        """
        Get bet by ID.

        Raises:
            BetNotFoundError: If bet not found
        """
        bet = await self.bet_repo.get_by_id(bet_id)
        if bet is None:
            raise BetNotFoundError(f"Bet '{bet_id}' not found")
        return bet

    async def evaluate_bet(self, bet_id: str | ObjectId, points: int) -> Bet:
        """
        Move a bet from PENDING to EVALUATED with the given points.

        Raises:
            BetNotFoundError: If bet not found
            InvalidBetTransitionError: If the bet was already evaluated
        """
        bet = await self.get_bet(bet_id)
        evaluated = bet.evaluate(points)

        saved = await self.bet_repo.mark_evaluated(evaluated)
        if saved is None:
            raise InvalidBetTransitionError(f"Bet '{bet_id}' was evaluated concurrently")

        logger.info("Bet evaluated", bet_id=str(saved.id), points=saved.points)
        return saved
