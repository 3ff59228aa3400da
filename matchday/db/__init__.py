"""Motor connection handling and the index layout."""

from matchday.db.connection import (
    DatabaseConnection,
    close_database,
    get_connection,
    get_database,
)
from matchday.db.indexes import ensure_indexes, get_index_definitions

__all__ = [
    "DatabaseConnection",
    "close_database",
    "ensure_indexes",
    "get_connection",
    "get_database",
    "get_index_definitions",
]
