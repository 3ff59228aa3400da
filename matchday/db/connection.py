"""
Motor client lifecycle.

The API owns one DatabaseConnection per process (opened in the lifespan);
CLI commands share a module-level one through `get_database()`.
"""

import asyncio
from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from matchday.config.settings import MongoSettings, get_settings

logger = structlog.get_logger(__name__)


class DatabaseConnection:
    """
    Owns a Motor client and the application database.

    Usage:
        connection = DatabaseConnection(settings.mongo)
        await connection.connect()
        users = connection.database["users"]
        await connection.disconnect()

    Or:
        async with DatabaseConnection() as db:
            ...
    """

    def __init__(self, settings: MongoSettings | None = None) -> None:
        self.settings = settings or get_settings().mongo
        self._client: AsyncIOMotorClient | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            raise RuntimeError("MongoDB client is not open; await connect() first")
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.client[self.settings.db_name]

    def _client_options(self) -> dict[str, Any]:
        # Datetimes come back timezone-aware (UTC) so they compare with utc_now()
        return {
            "tz_aware": True,
            "minPoolSize": self.settings.min_pool_size,
            "maxPoolSize": self.settings.max_pool_size,
            "maxIdleTimeMS": self.settings.max_idle_time_ms,
            "connectTimeoutMS": self.settings.connect_timeout_ms,
            "serverSelectionTimeoutMS": self.settings.server_selection_timeout_ms,
        }

    async def connect(self) -> None:
        """
        Open the client and ping the server.

        Raises:
            PyMongoError: If the server cannot be reached
        """
        async with self._lock:
            if self._client is not None:
                return

            log = logger.bind(
                host=self.settings.host,
                port=self.settings.port,
                database=self.settings.db_name,
            )
            log.info("Connecting to MongoDB")

            client = AsyncIOMotorClient(self.settings.uri, **self._client_options())
            try:
                await client.admin.command("ping")
            except PyMongoError as e:
                log.error("MongoDB did not answer", error=str(e))
                client.close()
                raise

            self._client = client
            log.info("Connected to MongoDB")

    async def disconnect(self) -> None:
        async with self._lock:
            if self._client is None:
                return
            self._client.close()
            self._client = None
            logger.info("Disconnected from MongoDB")

    async def health_check(self) -> dict[str, Any]:
        """
        Ping the server and report latency.

        Never raises; failures are reported with `healthy: False`.
        """
        if self._client is None:
            return {"status": "disconnected", "healthy": False, "error": "No active connection"}

        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            await self._client.admin.command("ping")
            server_info = await self._client.server_info()
        except PyMongoError as e:
            logger.error("MongoDB health check failed", error=str(e))
            return {"status": "error", "healthy": False, "error": str(e)}

        return {
            "status": "connected",
            "healthy": True,
            "latency_ms": round((loop.time() - started) * 1000, 2),
            "server_version": server_info.get("version", "unknown"),
        }

    async def __aenter__(self) -> AsyncIOMotorDatabase:
        await self.connect()
        return self.database

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()


# Shared by CLI commands
_db_connection: DatabaseConnection | None = None


async def get_connection() -> DatabaseConnection:
    """The shared connection, created on first use (not opened)."""
    global _db_connection

    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection


async def get_database() -> AsyncIOMotorDatabase:
    """The application database of the shared connection, opening it if needed."""
    connection = await get_connection()
    if not connection.is_connected:
        await connection.connect()
    return connection.database


async def close_database() -> None:
    global _db_connection

    if _db_connection is not None:
        await _db_connection.disconnect()
        _db_connection = None
