"""
Index layout of every collection.

Applied by `matchday db init`, migration 001 and API startup; creating an
index that already exists is a no-op.
"""

from typing import Any

import structlog
from pymongo import ASCENDING, DESCENDING, IndexModel

logger = structlog.get_logger(__name__)


def _index(name: str, *keys: tuple[str, int], **options: Any) -> IndexModel:
    return IndexModel(list(keys), name=name, **options)


INDEXES: dict[str, tuple[IndexModel, ...]] = {
    "users": (
        _index("users_username_unique", ("username", ASCENDING), unique=True),
        _index("users_email_unique", ("email", ASCENDING), unique=True),
        _index("users_group", ("group_id", ASCENDING)),
    ),
    "groups": (
        _index("groups_name", ("name", ASCENDING)),
        _index("groups_followed_team", ("followed_teams.api_id", ASCENDING)),
    ),
    "games": (
        _index("games_group_date", ("group_id", ASCENDING), ("date", ASCENDING)),
        # A fixture is copied once into each group that bets on it
        _index(
            "games_fixture_group_unique",
            ("api_id", ASCENDING),
            ("group_id", ASCENDING),
            unique=True,
        ),
    ),
    "bets": (
        _index("bets_user_game_unique", ("user", ASCENDING), ("game", ASCENDING), unique=True),
        _index("bets_game_status", ("game", ASCENDING), ("status", ASCENDING)),
        _index("bets_user_history", ("user", ASCENDING), ("created_at", DESCENDING)),
    ),
    "sessions": (
        # TTL: the server removes a session once expires_at has passed
        _index("sessions_ttl", ("expires_at", ASCENDING), expireAfterSeconds=0),
    ),
}


def get_index_definitions() -> dict[str, list[IndexModel]]:
    return {collection: list(indexes) for collection, indexes in INDEXES.items()}


async def ensure_indexes(db: Any) -> dict[str, list[str]]:
    """Create every index; returns the index names per collection."""
    created: dict[str, list[str]] = {}
    for collection, indexes in INDEXES.items():
        created[collection] = await db[collection].create_indexes(list(indexes))
    logger.debug("Indexes ensured", collections=list(created))
    return created
