"""
Database migrations module.

Each module in `versions/` defines VERSION, DESCRIPTION and async
`upgrade`, `downgrade` and `is_applied` functions taking a Motor database.
Applied versions are recorded in the `_migrations` collection.
"""

import importlib
import pkgutil
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "versions"


def load_migrations() -> list[ModuleType]:
    """All migration modules, ordered by version."""
    modules = [
        importlib.import_module(f"{__name__}.versions.{info.name}")
        for info in pkgutil.iter_modules([str(MIGRATIONS_DIR)])
    ]
    return sorted(modules, key=lambda module: module.VERSION)


async def migration_status(db: Any) -> list[tuple[ModuleType, bool]]:
    """Each migration with whether it has been applied."""
    return [(module, await module.is_applied(db)) for module in load_migrations()]


async def apply_pending(db: Any) -> list[int]:
    """
    Apply every migration not applied yet, in version order.

    Returns:
        Versions that were applied
    """
    applied: list[int] = []
    for module, done in await migration_status(db):
        if done:
            continue
        logger.info("Applying migration", version=module.VERSION, description=module.DESCRIPTION)
        await module.upgrade(db)
        applied.append(module.VERSION)
    return applied


__all__ = ["MIGRATIONS_DIR", "apply_pending", "load_migrations", "migration_status"]
