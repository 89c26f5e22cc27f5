"""MongoDB database connection using Motor (async driver)."""
import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from finroute.config import settings

logger = structlog.get_logger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB. Calling it twice keeps the first client."""
        if self.client is not None:
            return
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        logger.info("mongodb_connected", db_name=settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("mongodb_disconnected")

    async def ensure_indexes(self) -> None:
        """Create the indexes the per-user range reads rely on."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        await self.db["users"].create_index("email", unique=True)
        await self.db["plans"].create_index([("user_id", 1), ("created_at", -1)])
        await self.db["reminders"].create_index([("user_id", 1), ("next_run_at", 1)])
        await self.db["achievements"].create_index([("user_id", 1), ("created_at", -1)])

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db[name]


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
