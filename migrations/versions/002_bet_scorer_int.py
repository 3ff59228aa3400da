"""
Bets: store numeric-text scorer ids as integers.

Migration version: 002
Description: Rewrites `scorer` values like "256" to 256 and stamps the
bets with schema version 2. Text that is not a number cannot name a
player and is cleared to null, so every stamped bet reads as version 2.
"""

from typing import Any

import structlog

from matchday.models.base import utc_now

logger = structlog.get_logger(__name__)

VERSION = 2
DESCRIPTION = "Convert text scorer ids on bets to integers"


async def upgrade(db: Any) -> dict[str, int]:
    result = await db["bets"].update_many(
        {"scorer": {"$type": "string"}},
        [
            {
                "$set": {
                    "scorer": {
                        "$convert": {
                            "input": {"$trim": {"input": "$scorer"}},
                            "to": "int",
                            "onError": None,
                            "onNull": None,
                        }
                    },
                    "_version": 2,
                }
            }
        ],
    )
    logger.info("Bet scorers converted", matched=result.matched_count, modified=result.modified_count)

    await db["_migrations"].insert_one(
        {
            "version": VERSION,
            "description": DESCRIPTION,
            "applied_at": utc_now(),
            "status": "applied",
        }
    )
    return {"bets": result.modified_count}


async def downgrade(db: Any) -> dict[str, int]:
    # Integer scorers are valid for both versions; only the record goes.
    await db["_migrations"].delete_one({"version": VERSION})
    return {"bets": 0}


async def is_applied(db: Any) -> bool:
    return await db["_migrations"].find_one({"version": VERSION}) is not None
