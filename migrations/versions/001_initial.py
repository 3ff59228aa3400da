"""
Indexes for users, groups, games, bets and sessions.

Migration version: 001
"""

from typing import Any

import structlog
from pymongo.errors import OperationFailure

from matchday.db.indexes import get_index_definitions
from matchday.models.base import utc_now

logger = structlog.get_logger(__name__)

VERSION = 1
DESCRIPTION = "Create indexes for every collection"


async def upgrade(db: Any) -> dict[str, list[str]]:
    created: dict[str, list[str]] = {}
    for collection, indexes in get_index_definitions().items():
        created[collection] = await db[collection].create_indexes(indexes)
        logger.info("Indexes created", collection=collection, indexes=created[collection])

    await db["_migrations"].insert_one(
        {"version": VERSION, "description": DESCRIPTION, "applied_at": utc_now(), "status": "applied"}
    )
    return created


async def downgrade(db: Any) -> dict[str, bool]:
    """Drop the indexes again; False for a collection where a drop failed."""
    dropped: dict[str, bool] = {}
    for collection, indexes in get_index_definitions().items():
        names = [index.document["name"] for index in indexes]
        dropped[collection] = True
        for name in names:
            try:
                await db[collection].drop_index(name)
            except OperationFailure as e:
                logger.warning("Index not dropped", collection=collection, index=name, error=str(e))
                dropped[collection] = False

    await db["_migrations"].delete_one({"version": VERSION})
    return dropped


async def is_applied(db: Any) -> bool:
    return await db["_migrations"].find_one({"version": VERSION}) is not None
