import logging

import certifi
from motor.motor_asyncio import AsyncIOMotorClient

from .config import get_settings

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient = None
db = None


async def connect_db():
    """Connect when MONGO_URI is set; otherwise history stays in memory."""
    global client, db
    settings = get_settings()
    if not settings.mongo_uri:
        logger.info("MONGO_URI not set — using in-memory history store")
        return

    if settings.mongo_tls:
        # certifi's CA bundle reliably verifies hosted clusters (e.g. Atlas)
        client = AsyncIOMotorClient(settings.mongo_uri, tls=True, tlsCAFile=certifi.where())
    else:
        client = AsyncIOMotorClient(settings.mongo_uri)
    db = client[settings.mongo_db_name]
    await db.analysis_history.create_index("id", unique=True)
    await db.analysis_history.create_index("analyzed_at")
    logger.info("Connected to MongoDB: %s", settings.mongo_db_name)


async def close_db():
    global client, db
    if client:
        client.close()
        client = None
        db = None
        logger.info("MongoDB connection closed")


def get_db():
    return db
