"""Server-side login session bound to a signed cookie."""

from datetime import datetime, timedelta

from matchday.models.base import TimestampedModel, utc_now
from matchday.validators.custom_types import PyObjectId


class Session(TimestampedModel):
    """
    Session document model.

    The document id is the session id stored in the cookie.

    Indexes:
        - expires_at: TTL, MongoDB removes expired sessions
    """

    user_id: PyObjectId
    expires_at: datetime

    @classmethod
    def start(cls, user_id: PyObjectId, ttl: timedelta) -> "Session":
        return cls(user_id=user_id, expires_at=utc_now() + ttl)
