"""
BSON-aware field types for the Pydantic models.

`PyObjectId` lets models carry native ObjectIds into Motor while rendering
them as hex strings in API responses.
"""

import re
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, PydanticCustomError, core_schema

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_.-]*$")


class PyObjectId(ObjectId):
    """
    ObjectId field type.

    Input may be an ObjectId or its 24-character hex form. `model_dump()`
    leaves the ObjectId alone; `model_dump(mode="json")` writes the hex string.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: Any,
        _handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        from_any = core_schema.no_info_plain_validator_function(cls.validate)
        return core_schema.json_or_python_schema(
            json_schema=from_any,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(ObjectId), from_any]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                cls.serialize,
                return_schema=core_schema.str_schema(),
                when_used="json",
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls,
        _core_schema: CoreSchema,
        handler: GetJsonSchemaHandler,
    ) -> JsonSchemaValue:
        return {"type": "string", "pattern": "^[0-9a-fA-F]{24}$", "example": "66c1f0a2e4b0a1b2c3d4e5f6"}

    @classmethod
    def validate(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if not isinstance(value, str):
            raise PydanticCustomError(
                "objectid_type",
                "Expected an ObjectId or hex string, got {type}",
                {"type": type(value).__name__},
            )
        if value == "":
            raise PydanticCustomError("objectid_empty", "ObjectId must not be empty")
        try:
            return ObjectId(value)
        except InvalidId as e:
            raise PydanticCustomError(
                "objectid_invalid",
                "'{value}' is not a valid ObjectId",
                {"value": value},
            ) from e

    @classmethod
    def serialize(cls, value: ObjectId) -> str:
        return str(value)


def to_object_id(value: str | ObjectId) -> ObjectId | None:
    """Parse an id taken from a path, body or cookie; None when malformed."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def validate_username(value: str) -> str:
    """Usernames start with a letter, then letters, digits, `_`, `.` or `-`."""
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValueError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(value) > USERNAME_MAX_LENGTH:
        raise ValueError(f"Username cannot exceed {USERNAME_MAX_LENGTH} characters")
    if USERNAME_PATTERN.fullmatch(value) is None:
        raise ValueError(
            "Username must start with a letter and use only letters, digits, '_', '.' or '-'"
        )
    return value


def coerce_scorer(value: Any) -> Any:
    """Read a numeric-text scorer id ("256") as an int; blank text becomes None."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return value
