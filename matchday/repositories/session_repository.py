"""Session store backed by the `sessions` collection."""

from matchday.models.base import utc_now
from matchday.models.session import Session
from matchday.repositories.base import BaseRepository, DocumentId
from matchday.validators.custom_types import to_object_id


class SessionRepository(BaseRepository[Session]):
    """Repository for login sessions."""

    collection_name = "sessions"
    model_class = Session

    async def get_active(self, session_id: DocumentId) -> Session | None:
        """A session that exists and has not expired yet."""
        object_id = to_object_id(session_id)
        if object_id is None:
            return None
        return await self.find_one({"_id": object_id, "expires_at": {"$gt": utc_now()}})
