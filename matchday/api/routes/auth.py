"""Session authentication endpoints."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response
from pydantic import AliasChoices, BaseModel, Field

from matchday.api.dependencies import (
    SESSION_KEY,
    get_auth_service,
    get_current_user,
    get_settings,
    require_user,
)
from matchday.api.errors import ResponseMessage
from matchday.config.settings import Settings
from matchday.models.user import User, UserResponse
from matchday.services import AuthService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth")

RequiredText = Annotated[str, Field(min_length=1)]


class LoginRequest(BaseModel):
    username: RequiredText
    password: RequiredText


class ChangePasswordRequest(BaseModel):
    # Web clients send camelCase names
    old_password: RequiredText = Field(
        validation_alias=AliasChoices("old_password", "oldPassword")
    )
    new_password: RequiredText = Field(
        validation_alias=AliasChoices("new_password", "newPassword")
    )
    confirmed_password: RequiredText = Field(
        validation_alias=AliasChoices("confirmed_password", "confirmedPassword")
    )


@router.get("/user")
async def get_user(
    user: User | None = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse | None:
    """The logged-in user with populated bets, or null."""
    if user is None:
        return None
    return await service.describe_user(user)


@router.get("/logout")
async def logout(
    request: Request,
    settings: Settings = Depends(get_settings),
    service: AuthService = Depends(get_auth_service),
) -> Response:
    session_id = request.session.get(SESSION_KEY)
    request.session.clear()
    await service.logout(session_id, delete_record=settings.app.is_production)
    logger.info("User logged out", session_id=session_id)
    return Response(status_code=200)


@router.post("/login")
async def login(
    request: Request,
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> dict:
    session = await service.login(data.username, data.password)
    request.session.clear()
    request.session[SESSION_KEY] = str(session.id)
    return {"message": ResponseMessage.LOGIN_SUCCESSFUL.value}


@router.post("/password")
async def change_password(
    data: ChangePasswordRequest,
    user: User = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
) -> Response:
    await service.change_password(
        user.id, data.old_password, data.new_password, data.confirmed_password
    )
    return Response(status_code=200)
