"""
User repository for database operations.

Provides async CRUD operations and queries for User documents.
"""

from bson import ObjectId

from matchday.models.base import utc_now
from matchday.models.user import User
from matchday.repositories.base import BaseRepository, DocumentId


class UserRepository(BaseRepository[User]):
    """
    Repository for User document operations.

    Provides specialized methods for user-related queries
    in addition to base CRUD operations.
    """

    collection_name = "users"
    model_class = User

    async def find_by_username(self, username: str) -> User | None:
        """Find user by username."""
        return await self.find_one({"username": username})

    async def update_password(self, user_id: DocumentId, password_hash: str) -> User | None:
        """
        Replace the stored password hash.

        Returns:
            Updated User if found, None otherwise
        """
        return await self.update_by_id(user_id, {"$set": {"password": password_hash}})

    async def update_login(self, user_id: DocumentId) -> User | None:
        """Update user's last login timestamp."""
        return await self.update_by_id(user_id, {"$set": {"last_login_at": utc_now()}})

    async def add_bet(self, user_id: DocumentId, bet_id: ObjectId) -> bool:
        """Append a bet id to the user's bets."""
        return await self.push(user_id, "bets", bet_id)
