import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..config import settings

logger = logging.getLogger(__name__)

TESTS = "tests"
QUESTIONS = "questions"
ADMINS = "admins"


class MongoDB:
    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None


mongodb = MongoDB()
_connect_lock = asyncio.Lock()


async def ensure_indexes(db: AsyncIOMotorDatabase):
    """
    Create the indexes the application relies on. The compound unique
    index on tests is the durable guard against duplicate schedules.
    """
    await db[TESTS].create_index(
        [("date", ASCENDING), ("testType", ASCENDING), ("phase", ASCENDING)],
        unique=True,
        name="date_testType_phase_unique",
    )
    await db[QUESTIONS].create_index([("testId", ASCENDING)], name="testId")
    await db[QUESTIONS].create_index(
        [("testId", ASCENDING), ("questionNumber", ASCENDING)],
        name="testId_questionNumber",
    )
    await db[ADMINS].create_index([("email", ASCENDING)], unique=True, name="email_unique")
    logger.info("MongoDB indexes ensured")


async def connect_to_db() -> AsyncIOMotorDatabase:
    """
    Open the process-wide MongoDB client once and reuse it afterwards.
    """
    async with _connect_lock:
        if mongodb.db is not None:
            return mongodb.db

        client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
        db = client[settings.MONGODB_DB_NAME]
        await client.admin.command("ping")
        logger.info(f"Connected to MongoDB database '{settings.MONGODB_DB_NAME}'")
        await ensure_indexes(db)
        mongodb.client, mongodb.db = client, db
        return db


async def close_db_connection():
    if mongodb.client is not None:
        mongodb.client.close()
        logger.info("MongoDB connection closed")
    mongodb.client = None
    mongodb.db = None


async def get_database() -> AsyncIOMotorDatabase:
    if mongodb.db is None:
        return await connect_to_db()
    return mongodb.db
