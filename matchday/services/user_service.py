"""
User service with business logic for user management.

Users are created by an admin directly inside an existing group.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from matchday.errors import ConflictError, MatchdayError, NotFoundError
from matchday.models.user import User, UserCreate
from matchday.repositories.group_repository import GroupRepository
from matchday.repositories.user_repository import UserRepository
from matchday.services.group_service import GroupNotFoundError
from matchday.services.passwords import hash_password

logger = structlog.get_logger(__name__)


class UserServiceError(MatchdayError):
    """Base exception for user service errors."""


class UserNotFoundError(UserServiceError, NotFoundError):
    """Raised when user is not found."""


class UserAlreadyExistsError(UserServiceError, ConflictError):
    """Raised when trying to create a user that already exists."""


class UserService:
    """
    Service layer for user operations.

    Usage:
        db = await get_database()
        user_service = UserService(db)
        user = await user_service.create_user(UserCreate(...))
    """

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        """
        Initialize user service.

        Args:
            database: Motor database instance
        """
        self.db = database
        self.repository = UserRepository(database)
        self.group_repo = GroupRepository(database)

    async def create_user(self, data: UserCreate) -> User:
        """
        Create a user inside a group.

        Raises:
            GroupNotFoundError: If the group does not exist
            UserAlreadyExistsError: If username or email is taken
        """
        logger.info("Fetching the group", group_id=str(data.group))
        group = await self.group_repo.get_by_id(data.group)
        if group is None:
            logger.warning("Group doesn't exist", group_id=str(data.group))
            raise GroupNotFoundError("Selected group doesn't exist.")

        user = User(
            username=data.username,
            email=data.email,
            password=await hash_password(data.password),
            group_id=group.id,
        )

        logger.info("Creating a new user", username=data.username)
        try:
            created = await self.repository.create(user)
        except DuplicateKeyError as e:
            logger.warning("User already exists", username=data.username, email=data.email)
            raise UserAlreadyExistsError(
                f"A user with username '{data.username}' or email '{data.email}' already exists"
            ) from e

        await self.group_repo.add_user(group.id, created.id)
        logger.info("New user created", user_id=str(created.id), group_id=str(group.id))
        return created
