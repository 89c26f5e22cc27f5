"""Drop all data for a specific user."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient

from finroute.config import settings
from finroute.log import configure_logging

logger = structlog.get_logger("drop_user_data")

USER_COLLECTIONS = ["plans", "reminders", "achievements"]


async def drop_user_data(mongodb_url: str, user_id: str, include_profile: bool = False):
    """Delete every document a user owns, optionally the profile too."""
    client = AsyncIOMotorClient(mongodb_url)
    db = client[settings.mongodb_db_name]

    for collection_name in USER_COLLECTIONS:
        result = await db[collection_name].delete_many({"user_id": user_id})
        logger.info("deleted", collection=collection_name, count=result.deleted_count)

    if include_profile:
        result = await db["users"].delete_one({"_id": ObjectId(user_id)})
        logger.info("deleted", collection="users", count=result.deleted_count)

    client.close()


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4) or (len(sys.argv) == 4 and sys.argv[3] != "--profile"):
        print("Usage: python drop_user_data.py <mongodb_url> <user_id> [--profile]")
        sys.exit(1)

    configure_logging()
    asyncio.run(drop_user_data(sys.argv[1], sys.argv[2], include_profile=len(sys.argv) == 4))
