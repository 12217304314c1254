"""
MongoDB database connection and utilities
"""
from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional
from traffictrack.config import settings
import logging

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    database = None


# Global database instance
db = Database()


async def connect_to_mongo():
    """Connect to MongoDB (optional - API falls back to the in-memory store if this fails)"""
    try:
        db.client = AsyncIOMotorClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=10000,
        )
        db.database = db.client[settings.mongodb_db_name]

        # Test connection
        await db.client.admin.command('ping')
        logger.info(f"Connected to MongoDB: {settings.mongodb_db_name}")

        await create_indexes()

    except Exception as e:
        error_msg = str(e)
        if "authentication" in error_msg.lower():
            logger.warning("MongoDB authentication failed. Check username/password in connection string.")
        else:
            logger.warning(f"Failed to connect to MongoDB: {e}")
        # Don't raise - allow API to start without MongoDB
        if db.client:
            db.client.close()
        db.client = None
        db.database = None


async def close_mongo_connection():
    """Close MongoDB connection"""
    if db.client:
        db.client.close()
        logger.info("MongoDB connection closed")


async def create_indexes():
    """Create indexes backing the area and recency queries"""
    if db.database is None:
        logger.warning("Database not connected, skipping index creation")
        return

    try:
        flows = db.database.traffic_flows
        await flows.create_index([("latitude", 1), ("longitude", 1)])
        await flows.create_index([("recorded_at", -1)])

        events = db.database.traffic_events
        await events.create_index([("latitude", 1), ("longitude", 1)])
        await events.create_index([("start_time", -1)])
        await events.create_index([("recorded_at", -1)])

        logger.info("Database indexes created successfully")

    except Exception as e:
        logger.warning(f"Failed to create some indexes: {e}")


def get_database():
    """Get database instance"""
    return db.database
