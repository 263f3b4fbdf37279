"""
SQL storage backend built on SQLAlchemy 2.0 async sessions.
Works with SQLite (aiosqlite) and PostgreSQL (asyncpg).
"""
from sqlalchemy import select, delete, text
from sqlalchemy.ext.asyncio import async_sessionmaker
from typing import Any, Dict, List, Optional
import logging

from showroom.models import ContactInquiry, GalleryItem, Product
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


class SqlStorage(Storage):
    """Storage backed by the products, gallery_items and contact_inquiries tables."""

    def __init__(self, session_factory: async_sessionmaker = None):
        super().__init__()
        if session_factory is None:
            from showroom.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self._session_factory = session_factory

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {str(e)}", exc_info=True)
            return False

    async def _list(self, model, schema, *order_by) -> list:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(model).order_by(*order_by))
                rows = result.scalars().all()
                return [schema.model_validate(row) for row in rows]
        except Exception as e:
            logger.error(f"Error fetching {model.__tablename__}: {str(e)}", exc_info=True)
            return []

    async def _get(self, model, schema, record_id: str):
        try:
            async with self._session_factory() as session:
                row = await session.get(model, record_id)
                return schema.model_validate(row) if row else None
        except Exception as e:
            logger.error(f"Error fetching {model.__tablename__} {record_id}: {str(e)}", exc_info=True)
            return None

    async def _create(self, model, schema, data: Dict[str, Any]):
        try:
            now = utcnow()
            async with self._session_factory() as session:
                row = model(**data, id=new_id(), created_at=now, updated_at=now)
                session.add(row)
                await session.commit()
                await session.refresh(row)
                logger.info(f"Created {model.__tablename__} record {row.id}")
                return schema.model_validate(row)
        except Exception as e:
            logger.error(f"Error creating {model.__tablename__} record: {str(e)}", exc_info=True)
            return None

    async def _update(self, model, schema, record_id: str, updates: Dict[str, Any]):
        try:
            async with self._session_factory() as session:
                row = await session.get(model, record_id)
                if row is None:
                    return None
                for key, value in clean_updates(updates).items():
                    setattr(row, key, value)
                row.updated_at = utcnow()
                await session.commit()
                await session.refresh(row)
                return schema.model_validate(row)
        except Exception as e:
            logger.error(f"Error updating {model.__tablename__} {record_id}: {str(e)}", exc_info=True)
            return None

    async def _delete(self, model, record_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(delete(model).where(model.id == record_id))
                await session.commit()
                return result.rowcount == 1
        except Exception as e:
            logger.error(f"Error deleting {model.__tablename__} {record_id}: {str(e)}", exc_info=True)
            return False

    # Products
    async def get_products(self) -> List[ProductResponse]:
        return await self._list(Product, ProductResponse, Product.order_index.asc(), Product.created_at.desc())

    async def get_product(self, product_id: str) -> Optional[ProductResponse]:
        return await self._get(Product, ProductResponse, product_id)

    async def create_product(self, data: ProductCreate) -> Optional[ProductResponse]:
        return await self._create(Product, ProductResponse, data.model_dump())

    async def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductResponse]:
        return await self._update(Product, ProductResponse, product_id, updates)

    async def delete_product(self, product_id: str) -> bool:
        return await self._delete(Product, product_id)

    # Gallery
    async def get_gallery_items(self) -> List[GalleryItemResponse]:
        return await self._list(
            GalleryItem, GalleryItemResponse, GalleryItem.order_index.asc(), GalleryItem.created_at.desc()
        )

    async def get_gallery_item(self, item_id: str) -> Optional[GalleryItemResponse]:
        return await self._get(GalleryItem, GalleryItemResponse, item_id)

    async def create_gallery_item(self, data: GalleryItemCreate) -> Optional[GalleryItemResponse]:
        return await self._create(GalleryItem, GalleryItemResponse, data.model_dump())

    async def update_gallery_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[GalleryItemResponse]:
        return await self._update(GalleryItem, GalleryItemResponse, item_id, updates)

    async def delete_gallery_item(self, item_id: str) -> bool:
        return await self._delete(GalleryItem, item_id)

    # Contact inquiries
    async def get_contact_inquiries(self) -> List[ContactInquiryResponse]:
        return await self._list(ContactInquiry, ContactInquiryResponse, ContactInquiry.created_at.desc())

    async def get_contact_inquiry(self, inquiry_id: str) -> Optional[ContactInquiryResponse]:
        return await self._get(ContactInquiry, ContactInquiryResponse, inquiry_id)

    async def create_contact_inquiry(self, data: ContactInquiryCreate) -> Optional[ContactInquiryResponse]:
        return await self._create(ContactInquiry, ContactInquiryResponse, {**data.model_dump(), "status": "unread"})

    async def update_contact_inquiry_status(self, inquiry_id: str, status: str) -> Optional[ContactInquiryResponse]:
        return await self._update(ContactInquiry, ContactInquiryResponse, inquiry_id, {"status": status})

    async def delete_contact_inquiry(self, inquiry_id: str) -> bool:
        return await self._delete(ContactInquiry, inquiry_id)
