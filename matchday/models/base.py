"""
Shared Pydantic bases for Mongo documents and their subdocuments.

Documents keep native BSON values (ObjectId, datetime) when dumped for
Motor and render them as JSON-safe values for API responses.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Self

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from matchday.validators.custom_types import PyObjectId


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


_COMMON_CONFIG = ConfigDict(
    populate_by_name=True,
    use_enum_values=True,
    validate_assignment=True,
    arbitrary_types_allowed=True,
    str_strip_whitespace=True,
)


class EmbeddedModel(BaseModel):
    """Subdocument stored inside another document; has no `_id` of its own."""

    model_config = _COMMON_CONFIG


class MongoBaseModel(BaseModel):
    """
    Top-level document stored in its own collection.

    `id` is written to Mongo as `_id`:

        user.to_mongo()      -> {"_id": ObjectId(...), ...}
        user.to_json_dict()  -> {"id": "66c1...", ...}
    """

    model_config = _COMMON_CONFIG

    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")

    @classmethod
    def from_mongo(cls, document: dict[str, Any] | None) -> Self | None:
        return None if document is None else cls.model_validate(document)

    def to_mongo(self, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=exclude_none)

    def to_json_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=exclude_none)


class TimestampedModel(MongoBaseModel):
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class VersionedModel(TimestampedModel):
    """
    Document whose stored shape has changed over time.

    The stored shape version lives in `_version`. Subclasses bump
    SCHEMA_VERSION and add a `_upgrade_from_v{n}` classmethod for each
    step; `from_mongo` applies the missing steps before validation.
    Documents without `_version` are treated as version 1.
    """

    SCHEMA_VERSION: ClassVar[int] = 1

    version: int = Field(default=0, ge=0, alias="_version")

    def model_post_init(self, context: Any, /) -> None:
        if self.version == 0:
            self.version = self.SCHEMA_VERSION

    @classmethod
    def upgrade(cls, document: dict[str, Any]) -> dict[str, Any]:
        stored = document.get("_version") or 1
        for step in range(stored, cls.SCHEMA_VERSION):
            upgrade_step = getattr(cls, f"_upgrade_from_v{step}", None)
            if upgrade_step is not None:
                document = upgrade_step(document)
        document["_version"] = max(stored, cls.SCHEMA_VERSION)
        return document

    @classmethod
    def from_mongo(cls, document: dict[str, Any] | None) -> Self | None:
        if document is None:
            return None
        return cls.model_validate(cls.upgrade(dict(document)))
