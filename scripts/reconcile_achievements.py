"""Award plan achievements missing for a user (e.g. after a crash mid-generation)."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from finroute.database import database
from finroute.log import configure_logging
from finroute.services.achievement_service import AchievementService

logger = structlog.get_logger("reconcile_achievements")


async def reconcile(user_ids: list[str]):
    """Run achievement reconciliation for each user."""
    await database.connect()
    try:
        service = AchievementService(database.db)
        for user_id in user_ids:
            created = await service.reconcile(user_id)
            logger.info("reconciled", user_id=user_id, created=created)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python reconcile_achievements.py <user_id> [<user_id> ...]")
        sys.exit(1)

    configure_logging()
    asyncio.run(reconcile(sys.argv[1:]))
