"""
MongoDB connection management using the motor async driver.
Provides the database handle for the document backend and the GridFS bucket
for the database-resident image sink.
"""
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorDatabase,
    AsyncIOMotorGridFSBucket,
)
from typing import Optional
import logging

from showroom.config import settings

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"
GALLERY_COLLECTION = "gallery_items"
INQUIRIES_COLLECTION = "contact_inquiries"

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    """Return the process-wide MongoDB client, creating it on first use."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
    return _client


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[settings.MONGODB_DATABASE]


def get_gridfs_bucket(database: AsyncIOMotorDatabase = None) -> AsyncIOMotorGridFSBucket:
    return AsyncIOMotorGridFSBucket(database or get_database(), bucket_name=settings.GRIDFS_BUCKET)


async def init_mongo():
    """
    Verify the MongoDB connection and create indexes.
    Used by the startup event when the mongo backend or GridFS sink is configured.
    """
    database = get_database()
    try:
        await database.command("ping")
        for collection in (PRODUCTS_COLLECTION, GALLERY_COLLECTION, INQUIRIES_COLLECTION):
            await database[collection].create_index("id", unique=True)
        for collection in (PRODUCTS_COLLECTION, GALLERY_COLLECTION):
            await database[collection].create_index([("order_index", 1), ("created_at", -1)])
        await database[INQUIRIES_COLLECTION].create_index([("created_at", -1)])
        logger.info(f"Connected to MongoDB database '{settings.MONGODB_DATABASE}'")
    except Exception as e:
        logger.error(f"MongoDB connection failed ({type(e).__name__}): {str(e)}")
        raise


def close_mongo():
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB connection closed")
