"""
MongoDB storage backend.
Records are stored as plain documents keyed by their string `id` field;
Mongo's own `_id` never leaves this module.
"""
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Any, Dict, List, Optional
import logging

from showroom.mongodb import (
    GALLERY_COLLECTION,
    INQUIRIES_COLLECTION,
    PRODUCTS_COLLECTION,
)
from showroom.schemas import (
    ContactInquiryCreate,
    ContactInquiryResponse,
    GalleryItemCreate,
    GalleryItemResponse,
    ProductCreate,
    ProductResponse,
)
from showroom.services.storage.base import Storage, clean_updates, new_id, utcnow

logger = logging.getLogger(__name__)

NO_OBJECT_ID = {"_id": 0}
DISPLAY_ORDER = [("order_index", 1), ("created_at", -1)]
NEWEST_FIRST = [("created_at", -1)]


class MongoStorage(Storage):
    """Storage backed by MongoDB collections."""

    def __init__(self, database: AsyncIOMotorDatabase = None):
        super().__init__()
        if database is None:
            from showroom.mongodb import get_database
            database = get_database()
        self._db = database

    async def ping(self) -> bool:
        try:
            await self._db.command("ping")
            return True
        except Exception as e:
            logger.error(f"MongoDB ping failed: {str(e)}", exc_info=True)
            return False

    async def _list(self, collection: str, schema, sort) -> list:
        try:
            cursor = self._db[collection].find({}, NO_OBJECT_ID).sort(sort)
            documents = await cursor.to_list(length=None)
            return [schema.model_validate(doc) for doc in documents]
        except Exception as e:
            logger.error(f"Error fetching {collection}: {str(e)}", exc_info=True)
            return []

    async def _get(self, collection: str, schema, record_id: str):
        try:
            document = await self._db[collection].find_one({"id": record_id}, NO_OBJECT_ID)
            return schema.model_validate(document) if document else None
        except Exception as e:
            logger.error(f"Error fetching {collection} {record_id}: {str(e)}", exc_info=True)
            return None

    async def _create(self, collection: str, schema, data: Dict[str, Any]):
        try:
            now = utcnow()
            record = schema(**data, id=new_id(), created_at=now, updated_at=now)
            # insert_one adds _id to the dict it is given
            await self._db[collection].insert_one(record.model_dump())
            logger.info(f"Created {collection} record {record.id}")
            # Read back so timestamps match what later reads return
            return await self._get(collection, schema, record.id)
        except Exception as e:
            logger.error(f"Error creating {collection} record: {str(e)}", exc_info=True)
            return None

    async def _update(self, collection: str, schema, record_id: str, updates: Dict[str, Any]):
        try:
            changes = {**clean_updates(updates), "updated_at": utcnow()}
            result = await self._db[collection].update_one({"id": record_id}, {"$set": changes})
            if result.matched_count == 0:
                return None
            return await self._get(collection, schema, record_id)
        except Exception as e:
            logger.error(f"Error updating {collection} {record_id}: {str(e)}", exc_info=True)
            return None

    async def _delete(self, collection: str, record_id: str) -> bool:
        try:
            result = await self._db[collection].delete_one({"id": record_id})
            return result.deleted_count == 1
        except Exception as e:
            logger.error(f"Error deleting {collection} {record_id}: {str(e)}", exc_info=True)
            return False

    # Products
    async def get_products(self) -> List[ProductResponse]:
        return await self._list(PRODUCTS_COLLECTION, ProductResponse, DISPLAY_ORDER)

    async def get_product(self, product_id: str) -> Optional[ProductResponse]:
        return await self._get(PRODUCTS_COLLECTION, ProductResponse, product_id)

    async def create_product(self, data: ProductCreate) -> Optional[ProductResponse]:
        return await self._create(PRODUCTS_COLLECTION, ProductResponse, data.model_dump())

    async def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductResponse]:
        return await self._update(PRODUCTS_COLLECTION, ProductResponse, product_id, updates)

    async def delete_product(self, product_id: str) -> bool:
        return await self._delete(PRODUCTS_COLLECTION, product_id)

    # Gallery
    async def get_gallery_items(self) -> List[GalleryItemResponse]:
        return await self._list(GALLERY_COLLECTION, GalleryItemResponse, DISPLAY_ORDER)

    async def get_gallery_item(self, item_id: str) -> Optional[GalleryItemResponse]:
        return await self._get(GALLERY_COLLECTION, GalleryItemResponse, item_id)

    async def create_gallery_item(self, data: GalleryItemCreate) -> Optional[GalleryItemResponse]:
        return await self._create(GALLERY_COLLECTION, GalleryItemResponse, data.model_dump())

    async def update_gallery_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[GalleryItemResponse]:
        return await self._update(GALLERY_COLLECTION, GalleryItemResponse, item_id, updates)

    async def delete_gallery_item(self, item_id: str) -> bool:
        return await self._delete(GALLERY_COLLECTION, item_id)

    # Contact inquiries
    async def get_contact_inquiries(self) -> List[ContactInquiryResponse]:
        return await self._list(INQUIRIES_COLLECTION, ContactInquiryResponse, NEWEST_FIRST)

    async def get_contact_inquiry(self, inquiry_id: str) -> Optional[ContactInquiryResponse]:
        return await self._get(INQUIRIES_COLLECTION, ContactInquiryResponse, inquiry_id)

    async def create_contact_inquiry(self, data: ContactInquiryCreate) -> Optional[ContactInquiryResponse]:
        return await self._create(
            INQUIRIES_COLLECTION, ContactInquiryResponse, {**data.model_dump(), "status": "unread"}
        )

    async def update_contact_inquiry_status(self, inquiry_id: str, status: str) -> Optional[ContactInquiryResponse]:
        return await self._update(INQUIRIES_COLLECTION, ContactInquiryResponse, inquiry_id, {"status": status})

    async def delete_contact_inquiry(self, inquiry_id: str) -> bool:
        return await self._delete(INQUIRIES_COLLECTION, inquiry_id)
