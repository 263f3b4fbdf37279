"""
In-memory storage backend for development and tests.
"""
from typing import Any, Dict, List, Optional
import logging

from showroom.schemas import (
    ContactInquiryCreate,
    ContactInquiryResponse,
    GalleryItemCreate,
    GalleryItemResponse,
    ProductCreate,
    ProductResponse,
)
from showroom.services.storage.base import Storage, clean_updates, new_id, sort_for_display, utcnow

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """Keeps every record in process-local dicts keyed by id."""

    def __init__(self):
        super().__init__()
        self.products: Dict[str, ProductResponse] = {}
        self.gallery_items: Dict[str, GalleryItemResponse] = {}
        self.inquiries: Dict[str, ContactInquiryResponse] = {}

    def reset(self) -> None:
        self.products.clear()
        self.gallery_items.clear()
        self.inquiries.clear()

    @staticmethod
    def _create(table: dict, schema, data: dict):
        now = utcnow()
        record = schema(**data, id=new_id(), created_at=now, updated_at=now)
        table[record.id] = record
        return record.model_copy()

    @staticmethod
    def _update(table: dict, record_id: str, updates: Dict[str, Any]):
        existing = table.get(record_id)
        if existing is None:
            return None
        updated = existing.model_copy(update={**clean_updates(updates), "updated_at": utcnow()})
        table[record_id] = updated
        return updated.model_copy()

    @staticmethod
    def _get(table: dict, record_id: str):
        record = table.get(record_id)
        return record.model_copy() if record else None

    # Products
    async def get_products(self) -> List[ProductResponse]:
        return [p.model_copy() for p in sort_for_display(list(self.products.values()))]

    async def get_product(self, product_id: str) -> Optional[ProductResponse]:
        return self._get(self.products, product_id)

    async def create_product(self, data: ProductCreate) -> Optional[ProductResponse]:
        product = self._create(self.products, ProductResponse, data.model_dump())
        logger.info(f"Created product {product.id}")
        return product

    async def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductResponse]:
        return self._update(self.products, product_id, updates)

    async def delete_product(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None

    # Gallery
    async def get_gallery_items(self) -> List[GalleryItemResponse]:
        return [i.model_copy() for i in sort_for_display(list(self.gallery_items.values()))]

    async def get_gallery_item(self, item_id: str) -> Optional[GalleryItemResponse]:
        return self._get(self.gallery_items, item_id)

    async def create_gallery_item(self, data: GalleryItemCreate) -> Optional[GalleryItemResponse]:
        item = self._create(self.gallery_items, GalleryItemResponse, data.model_dump())
        logger.info(f"Created gallery item {item.id}")
        return item

    async def update_gallery_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[GalleryItemResponse]:
        return self._update(self.gallery_items, item_id, updates)

    async def delete_gallery_item(self, item_id: str) -> bool:
        return self.gallery_items.pop(item_id, None) is not None

    # Contact inquiries
    async def get_contact_inquiries(self) -> List[ContactInquiryResponse]:
        inquiries = sorted(self.inquiries.values(), key=lambda i: i.created_at, reverse=True)
        return [i.model_copy() for i in inquiries]

    async def get_contact_inquiry(self, inquiry_id: str) -> Optional[ContactInquiryResponse]:
        return self._get(self.inquiries, inquiry_id)

    async def create_contact_inquiry(self, data: ContactInquiryCreate) -> Optional[ContactInquiryResponse]:
        inquiry = self._create(self.inquiries, ContactInquiryResponse, {**data.model_dump(), "status": "unread"})
        logger.info(f"Created contact inquiry {inquiry.id}")
        return inquiry

    async def update_contact_inquiry_status(self, inquiry_id: str, status: str) -> Optional[ContactInquiryResponse]:
        return self._update(self.inquiries, inquiry_id, {"status": status})

    async def delete_contact_inquiry(self, inquiry_id: str) -> bool:
        return self.inquiries.pop(inquiry_id, None) is not None
