"""
Authentication service.

Verifies credentials with bcrypt and keeps login sessions in the
`sessions` collection. The HTTP layer stores only the session id, in a
signed cookie.
"""

from datetime import timedelta

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from matchday.config.settings import AppSettings
from matchday.errors import AuthenticationError, InvalidRequestError, MatchdayError
from matchday.models.session import Session
from matchday.models.user import User, UserResponse
from matchday.repositories.bet_repository import BetRepository
from matchday.repositories.session_repository import SessionRepository
from matchday.repositories.user_repository import UserRepository
from matchday.services.passwords import hash_password, verify_password
from matchday.services.user_service import UserNotFoundError

logger = structlog.get_logger(__name__)


class AuthServiceError(MatchdayError):
    """Base exception for authentication errors."""


class InvalidCredentialsError(AuthServiceError, AuthenticationError):
    """Raised when a username/password pair does not match."""


class PasswordsDontMatchError(AuthServiceError, InvalidRequestError):
    """Raised when the new password and its confirmation differ."""


class AuthService:
    """
    Service layer for login, logout and password changes.

    Usage:
        service = AuthService(db, settings.app)
        session = await service.login("john_doe", "secret")
        user = await service.resolve_session(session.id)
    """

    def __init__(self, database: AsyncIOMotorDatabase, settings: AppSettings) -> None:
        self.db = database
        self.settings = settings
        self.user_repo = UserRepository(database)
        self.session_repo = SessionRepository(database)
        self.bet_repo = BetRepository(database)

    async def authenticate(self, username: str, password: str) -> User:
        """
        Check a username/password pair.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        user = await self.user_repo.find_by_username(username)
        if user is None or not await verify_password(password, user.password):
            logger.warning("Failed login attempt", username=username)
            raise InvalidCredentialsError("Invalid username or password")
        return user

    async def login(self, username: str, password: str) -> Session:
        """
        Authenticate and open a session.

        Returns:
            The new session; its id goes into the session cookie
        """
        user = await self.authenticate(username, password)
        session = await self.session_repo.create(
            Session.start(user.id, timedelta(hours=self.settings.session_ttl_hours))
        )
        await self.user_repo.update_login(user.id)
        logger.info("User logged in", user_id=str(user.id), session_id=str(session.id))
        return session

    async def resolve_session(self, session_id: str | ObjectId) -> User | None:
        """The user of an active session, or None."""
        session = await self.session_repo.get_active(session_id)
        if session is None:
            return None
        return await self.user_repo.get_by_id(session.user_id)

    async def logout(self, session_id: str | ObjectId | None, *, delete_record: bool) -> None:
        """
        End a session.

        The cookie is cleared by the caller. When `delete_record` is set the
        session document is removed from the store as well; failing to do so
        is logged and does not fail the logout.
        """
        if session_id is None or not delete_record:
            return

        try:
            await self.session_repo.delete_by_id(session_id)
        except PyMongoError as e:
            logger.warning(
                "Couldn't delete session from the database",
                session_id=str(session_id),
                error=str(e),
            )

    async def change_password(
        self,
        user_id: str | ObjectId,
        old_password: str,
        new_password: str,
        confirmed_password: str,
    ) -> None:
        """
        Replace a user's password.

        Raises:
            PasswordsDontMatchError: If new and confirmed passwords differ
            UserNotFoundError: If the user no longer exists
            InvalidCredentialsError: If the old password is wrong
        """
        if new_password != confirmed_password:
            raise PasswordsDontMatchError("Passwords don't match.")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User doesn't exist")

        if not await verify_password(old_password, user.password):
            logger.warning("Wrong old password on password change", user_id=str(user.id))
            raise InvalidCredentialsError("Old password is incorrect")

        await self.user_repo.update_password(user.id, await hash_password(new_password))
        logger.info("Password changed", user_id=str(user.id), email=user.email)

    async def describe_user(self, user: User) -> UserResponse:
        """The user with bets populated, as returned by the API."""
        bets = await self.bet_repo.get_many_by_ids(user.bets)
        return UserResponse.from_user(user, bets)


__all__ = [
    "AuthService",
    "AuthServiceError",
    "InvalidCredentialsError",
    "PasswordsDontMatchError",
    "UserNotFoundError",
]
