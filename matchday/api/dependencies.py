"""FastAPI dependencies for dependency injection."""

import secrets

import structlog
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from matchday.api.errors import ResponseMessage
from matchday.clients.football_api import FootballApiClient
from matchday.config.settings import Settings
from matchday.db.connection import DatabaseConnection
from matchday.errors import AuthenticationError
from matchday.models.user import User
from matchday.services import AuthService, BetService, GroupService, UserService
from matchday.telemetry import Telemetry

logger = structlog.get_logger(__name__)

ADMIN_TOKEN_HEADER = "matchday-auth-token"
SESSION_KEY = "session_id"


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_telemetry(request: Request) -> Telemetry:
    return request.app.state.telemetry


def get_db_connection(request: Request) -> DatabaseConnection:
    return request.app.state.db_connection


def get_db(connection: DatabaseConnection = Depends(get_db_connection)) -> AsyncIOMotorDatabase:
    return connection.database


def get_football_api(request: Request) -> FootballApiClient:
    return request.app.state.football_api


def get_group_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
    football_api: FootballApiClient = Depends(get_football_api),
) -> GroupService:
    return GroupService(db, football_api)


def get_user_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserService:
    return UserService(db)


def get_auth_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings.app)


def get_bet_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> BetService:
    return BetService(db)


async def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    telemetry: Telemetry = Depends(get_telemetry),
) -> User | None:
    """
    The user of the session cookie, or None.

    A cookie pointing at an expired or deleted session is cleared.
    """
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        return None

    user = await auth_service.resolve_session(session_id)
    if user is None:
        logger.info("Session is no longer valid", session_id=session_id)
        request.session.clear()
        return None

    telemetry.identify(user)
    return user


async def require_user(
    request: Request,
    user: User | None = Depends(get_current_user),
) -> User:
    """The logged-in user; rejects the request otherwise."""
    if user is None:
        logger.warning(
            "Unauthorized request",
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )
        raise AuthenticationError(ResponseMessage.UNAUTHORIZED_REQUEST.value)
    return user


async def require_admin(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Accept only requests carrying the admin token header."""
    provided = request.headers.get(ADMIN_TOKEN_HEADER, "")
    expected = settings.app.admin_api_token.get_secret_value()

    if provided and secrets.compare_digest(provided.encode(), expected.encode()):
        return

    logger.warning(
        "Unauthorized admin request",
        path=request.url.path,
        client_ip=request.client.host if request.client else None,
        session_id=request.session.get(SESSION_KEY),
        token_provided=bool(provided),
    )
    raise AuthenticationError(ResponseMessage.UNAUTHORIZED_REQUEST.value)
