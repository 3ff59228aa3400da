"""
Service layer for business logic.

Services orchestrate operations between repositories and the football
data API, enforce business rules, and raise errors from the taxonomy in
`matchday.errors`.
"""

from matchday.services.auth_service import AuthService
from matchday.services.bet_service import BetService
from matchday.services.group_service import GroupService
from matchday.services.user_service import UserService

__all__ = [
    "AuthService",
    "BetService",
    "GroupService",
    "UserService",
]
