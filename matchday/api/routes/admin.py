"""
Admin endpoints.

Every route requires the admin token header.
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from matchday.api.dependencies import get_group_service, get_user_service, require_admin
from matchday.api.errors import ResponseErrorCode, ResponseMessage, error_response
from matchday.models.group import GroupCreate
from matchday.models.user import UserCreate
from matchday.services import GroupService, UserService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.get("/groups/team/upcoming")
async def fetch_upcoming_games() -> JSONResponse:
    """Manually fetch upcoming games of a group's team. Not implemented."""
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ResponseMessage.ENDPOINT_NOT_IMPLEMENTED.value,
        ResponseErrorCode.NOT_IMPLEMENTED.value,
    )


@router.post("/users")
async def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
) -> dict:
    """Create a user inside an existing group."""
    user = await service.create_user(data)
    return user.to_json_dict()


@router.post("/groups")
async def create_group(
    data: GroupCreate,
    service: GroupService = Depends(get_group_service),
) -> dict:
    """
    Create a group following a team, seeded from the football data API.

    Team information, team statistics and league standings are fetched
    first; the team's next game is stored and linked once the group exists.
    """
    group = await service.create_group(data)
    logger.info("A new group was created", group_id=str(group.id), name=group.name)
    return group.to_json_dict()
