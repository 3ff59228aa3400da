"""User accounts and the shape the auth endpoints return them in."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from matchday.models.base import TimestampedModel
from matchday.models.bet import Bet
from matchday.validators.custom_types import PyObjectId, validate_username


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class UserCreate(BaseModel):
    """Admin request body for a new user in an existing group."""

    username: str = Field(..., examples=["jan.novak"])
    email: EmailStr
    password: str = Field(..., min_length=1, description="Plain text; stored as a bcrypt hash")
    group: PyObjectId

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class User(TimestampedModel):
    """
    A member of one group.

    `username` and `email` are unique (see db.indexes). `bets` holds the
    ids of every bet the user has placed, newest last.
    """

    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., description="bcrypt hash")
    group_id: PyObjectId | None = None
    bets: list[PyObjectId] = Field(default_factory=list)
    last_login_at: datetime | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)

    def to_json_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        data = super().to_json_dict(exclude_none=exclude_none)
        del data["password"]
        return data


class UserResponse(BaseModel):
    """The signed-in user with bets expanded; scorer ids are always ints."""

    id: str
    username: str
    email: EmailStr
    group_id: str | None = None
    bets: list[dict[str, Any]] = Field(default_factory=list)
    created_at: datetime
    last_login_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User, bets: list[Bet]) -> "UserResponse":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            group_id=None if user.group_id is None else str(user.group_id),
            bets=[bet.to_json_dict() for bet in bets],
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )
