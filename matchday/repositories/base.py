"""
Generic Motor repository.

Repositories hand back results instead of raising for the ordinary cases:
a lookup that finds nothing (or gets a malformed id) returns None, and a
write that touches nothing returns None or False. Driver errors such as
DuplicateKeyError still propagate.
"""

from typing import Any, ClassVar, Generic, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from matchday.models.base import MongoBaseModel, utc_now
from matchday.validators.custom_types import to_object_id

ModelType = TypeVar("ModelType", bound=MongoBaseModel)

DocumentId = str | ObjectId


class BaseRepository(Generic[ModelType]):
    """
    CRUD over one collection, typed by its document model.

        class GameRepository(BaseRepository[Game]):
            collection_name = "games"
            model_class = Game
    """

    collection_name: ClassVar[str]
    model_class: ClassVar[type[MongoBaseModel]]

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self.database = database
        self.collection: AsyncIOMotorCollection = database[self.collection_name]

    def _to_model(self, document: dict[str, Any] | None) -> ModelType | None:
        return self.model_class.from_mongo(document)

    @staticmethod
    def _id_filter(id: DocumentId) -> dict[str, Any] | None:
        object_id = to_object_id(id)
        return None if object_id is None else {"_id": object_id}

    async def create(self, model: ModelType) -> ModelType:
        """Insert `model` (keeping its id) and return it as stored."""
        document = model.to_mongo()
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return self.model_class.model_validate(document)

    async def get_by_id(self, id: DocumentId) -> ModelType | None:
        id_filter = self._id_filter(id)
        if id_filter is None:
            return None
        return self._to_model(await self.collection.find_one(id_filter))

    async def get_many_by_ids(self, ids: list[DocumentId]) -> list[ModelType]:
        """Documents for `ids`, in the given order; unknown or malformed ids are skipped."""
        wanted = [oid for oid in map(to_object_id, ids) if oid is not None]
        if not wanted:
            return []

        found = {
            document["_id"]: document
            async for document in self.collection.find({"_id": {"$in": wanted}})
        }
        return [self._to_model(found[oid]) for oid in wanted if oid in found]

    async def find_one(self, filter: dict[str, Any]) -> ModelType | None:
        return self._to_model(await self.collection.find_one(filter))

    async def find_many(
        self,
        filter: dict[str, Any] | None = None,
        *,
        skip: int = 0,
        limit: int = 100,
        sort: list[tuple[str, int]] | None = None,
    ) -> list[ModelType]:
        cursor = self.collection.find(filter or {}, skip=skip, limit=limit, sort=sort)
        return [self._to_model(document) async for document in cursor]

    async def update_by_id(
        self,
        id: DocumentId,
        update: dict[str, Any],
        *,
        extra_filter: dict[str, Any] | None = None,
        array_filters: list[dict[str, Any]] | None = None,
    ) -> ModelType | None:
        """
        Apply `update` operators and return the updated document.

        `updated_at` is always refreshed. `extra_filter` narrows the match
        (e.g. a required current status); None means nothing matched.
        """
        id_filter = self._id_filter(id)
        if id_filter is None:
            return None

        stamped = dict(update)
        stamped["$set"] = {**update.get("$set", {}), "updated_at": utc_now()}

        document = await self.collection.find_one_and_update(
            {**id_filter, **(extra_filter or {})},
            stamped,
            array_filters=array_filters,
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(document)

    async def push(self, id: DocumentId, field: str, value: Any) -> bool:
        """Append `value` to the array `field`; False when no document changed."""
        id_filter = self._id_filter(id)
        if id_filter is None:
            return False

        result = await self.collection.update_one(
            id_filter,
            {"$push": {field: value}, "$set": {"updated_at": utc_now()}},
        )
        return result.modified_count > 0

    async def delete_by_id(self, id: DocumentId) -> bool:
        id_filter = self._id_filter(id)
        if id_filter is None:
            return False

        result = await self.collection.delete_one(id_filter)
        return result.deleted_count > 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(collection={self.collection_name!r})"
