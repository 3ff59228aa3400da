"""Bet placement endpoint."""

from fastapi import APIRouter, Depends, status

from matchday.api.dependencies import get_bet_service, require_user
from matchday.models.bet import BetCreate
from matchday.models.user import User
from matchday.services import BetService

router = APIRouter(prefix="/bets")


@router.post("", status_code=status.HTTP_201_CREATED)
async def place_bet(
    data: BetCreate,
    user: User = Depends(require_user),
    service: BetService = Depends(get_bet_service),
) -> dict:
    """Place a bet on an upcoming game of the user's group."""
    bet = await service.place_bet(user, data)
    return bet.to_json_dict()
