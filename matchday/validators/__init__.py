"""Field types and validators shared by the models."""

from matchday.validators.custom_types import (
    PyObjectId,
    coerce_scorer,
    to_object_id,
    validate_username,
)

__all__ = ["PyObjectId", "coerce_scorer", "to_object_id", "validate_username"]
