"""
Bet model and its status lifecycle.

A bet is a user's score prediction for one game. It starts PENDING and is
moved to EVALUATED exactly once, by the process that scores finished games.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Self

from pydantic import BaseModel, Field, field_validator

from matchday.errors import ConflictError, InvalidRequestError
from matchday.models.base import VersionedModel, utc_now
from matchday.validators.custom_types import PyObjectId, coerce_scorer


class BetStatus(str, Enum):
    """Possible states of a bet."""

    PENDING = "PENDING"  # Placed, waiting for the game to be scored
    EVALUATED = "EVALUATED"  # Points awarded; terminal


BET_TRANSITIONS: dict[BetStatus, frozenset[BetStatus]] = {
    BetStatus.PENDING: frozenset({BetStatus.EVALUATED}),
    BetStatus.EVALUATED: frozenset(),
}


class InvalidBetTransitionError(ConflictError):
    """Raised when a bet is asked to move to a status it cannot reach."""


def ensure_transition(current: BetStatus | str, target: BetStatus | str) -> BetStatus:
    """
    Check that a bet may move from `current` to `target`.

    Returns:
        The target status as a BetStatus

    Raises:
        InvalidBetTransitionError: If the transition is not allowed
    """
    current = BetStatus(current)
    target = BetStatus(target)
    if target not in BET_TRANSITIONS[current]:
        raise InvalidBetTransitionError(
            f"Bet cannot move from {current.value} to {target.value}"
        )
    return target


Score = Annotated[int, Field(ge=0, le=99)]


class BetCreate(BaseModel):
    """Bet as submitted by a user."""

    game: PyObjectId = Field(..., description="Game being predicted")
    home_team_score: Score = Field(..., description="Predicted goals for the home team")
    away_team_score: Score = Field(..., description="Predicted goals for the away team")
    scorer: int | None = Field(default=None, description="Predicted scorer (player API id)")

    @field_validator("scorer", mode="before")
    @classmethod
    def normalize_scorer(cls, v: Any) -> Any:
        return coerce_scorer(v)


class Bet(VersionedModel):
    """
    Bet document model.

    Indexes:
        - (user, game): unique, one bet per user per game
        - (game, status): pending bets of a game for evaluation
    """

    # v2: scorer stored as an int (v1 documents may hold it as text)
    SCHEMA_VERSION: ClassVar[int] = 2

    home_team_score: Score = Field(default=1, description="Predicted goals for the home team")
    away_team_score: Score = Field(default=1, description="Predicted goals for the away team")
    scorer: int | None = Field(default=None, description="Predicted scorer (player API id)")
    game: PyObjectId = Field(..., description="Reference to game document")
    user: PyObjectId = Field(..., description="Reference to user document")
    status: BetStatus = Field(default=BetStatus.PENDING, validate_default=True)
    points: int = Field(default=0, ge=0, description="Points awarded on evaluation")

    @field_validator("scorer", mode="before")
    @classmethod
    def normalize_scorer(cls, v: Any) -> Any:
        """Older clients submitted the scorer id as text ("256")."""
        return coerce_scorer(v)

    @classmethod
    def _upgrade_from_v1(cls, document: dict[str, Any]) -> dict[str, Any]:
        # Text that is not a player id cannot be scored; drop it like migration 002
        if "scorer" in document:
            scorer = coerce_scorer(document["scorer"])
            document["scorer"] = scorer if isinstance(scorer, int) else None
        return document

    @property
    def is_evaluated(self) -> bool:
        return self.status == BetStatus.EVALUATED

    def evaluate(self, points: int) -> Self:
        """
        Return an evaluated copy of this bet.

        Raises:
            InvalidBetTransitionError: If the bet was already evaluated
            InvalidRequestError: If points is negative
        """
        status = ensure_transition(self.status, BetStatus.EVALUATED)
        if points < 0:
            raise InvalidRequestError("Points cannot be negative")

        return self.model_copy(
            update={
                "status": status.value,
                "points": points,
                "updated_at": utc_now(),
            }
        )

    @classmethod
    def from_create(cls, data: BetCreate, user_id: PyObjectId) -> "Bet":
        return cls(
            game=data.game,
            user=user_id,
            home_team_score=data.home_team_score,
            away_team_score=data.away_team_score,
            scorer=data.scorer,
        )
