"""
Pydantic models for the Matchday API.

This module exports all domain models used throughout the application:
- User: user account
- Group: group with followed teams and embedded competition data
- Game: fixture a group bets on
- Bet: user prediction with its status lifecycle
- Session: server-side login session
"""

from matchday.models.base import EmbeddedModel, MongoBaseModel, TimestampedModel, VersionedModel
from matchday.models.bet import Bet, BetCreate, BetStatus, InvalidBetTransitionError
from matchday.models.game import Game, TeamInfo
from matchday.models.group import (
    Competition,
    FollowedTeam,
    Group,
    GroupCreate,
    Season,
    Standing,
    TeamStatistics,
)
from matchday.models.session import Session
from matchday.models.user import User, UserCreate, UserResponse

__all__ = [
    # Base
    "EmbeddedModel",
    "MongoBaseModel",
    "TimestampedModel",
    "VersionedModel",
    # User
    "User",
    "UserCreate",
    "UserResponse",
    # Group
    "Group",
    "GroupCreate",
    "FollowedTeam",
    "Season",
    "Competition",
    "Standing",
    "TeamStatistics",
    # Game
    "Game",
    "TeamInfo",
    # Bet
    "Bet",
    "BetCreate",
    "BetStatus",
    "InvalidBetTransitionError",
    # Session
    "Session",
]
