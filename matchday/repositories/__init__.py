"""
Repository layer for data access.

Provides abstraction over MongoDB collections with async operations
using Motor driver. Each repository handles CRUD operations and
queries for its respective domain model.
"""

from matchday.repositories.base import BaseRepository
from matchday.repositories.bet_repository import BetRepository
from matchday.repositories.game_repository import GameRepository
from matchday.repositories.group_repository import GroupRepository
from matchday.repositories.session_repository import SessionRepository
from matchday.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BetRepository",
    "GameRepository",
    "GroupRepository",
    "SessionRepository",
    "UserRepository",
]
