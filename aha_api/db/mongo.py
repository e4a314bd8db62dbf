from motor.motor_asyncio import AsyncIOMotorClient
from aha_api.core.config import Settings
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

    def __init__(self, settings: Settings):
        self.settings = settings

    async def connect_to_database(self):
        logger.info("Connecting to MongoDB...")
        try:
            self.client = AsyncIOMotorClient(self.settings.MONGO_URI)
            # Motor connects lazily; ping so a bad URI fails at startup
            await self.client.admin.command("ping")
            self.db = self.client[self.settings.MONGO_DB_NAME]
            logger.info("Connected to MongoDB.")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise e

    async def close_database_connection(self):
        logger.info("Closing MongoDB connection...")
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed.")
