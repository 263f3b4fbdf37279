"""
Abstract storage interface shared by the memory, SQL and MongoDB backends.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import uuid

from showroom.schemas import (
    CategoryResponse,
    ContactInquiryCreate,
    ContactInquiryResponse,
    GalleryItemCreate,
    GalleryItemResponse,
    ProductCreate,
    ProductResponse,
)

# Static reference data, seeded into every backend at startup
DEFAULT_CATEGORIES = [
    {
        "name": "Mattresses",
        "slug": "mattresses",
        "description": "Premium memory foam, coir, and orthopedic mattresses",
        "icon": "Bed",
    },
    {
        "name": "Curtains",
        "slug": "curtains",
        "description": "Beautiful curtains with custom stitching available",
        "icon": "Blinds",
    },
    {
        "name": "Sofas",
        "slug": "sofas",
        "description": "Sofa making and repairing services",
        "icon": "Armchair",
    },
    {
        "name": "Wallpapers",
        "slug": "wallpapers",
        "description": "Imported wallpapers and 3D designs",
        "icon": "Wallpaper",
    },
    {
        "name": "Flooring",
        "slug": "flooring",
        "description": "PVC and vinyl flooring solutions",
        "icon": "Grid",
    },
    {
        "name": "Carpets",
        "slug": "carpets",
        "description": "Designer rugs and carpets",
        "icon": "Layout",
    },
    {
        "name": "Blinds",
        "slug": "blinds",
        "description": "Window blinds for light control",
        "icon": "Minimize2",
    },
    {
        "name": "Artificial Grass",
        "slug": "artificial-grass",
        "description": "Lively artificial grass for outdoor spaces",
        "icon": "Trees",
    },
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def clean_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys that are absent from a partial patch, plus immutable fields."""
    return {
        key: value
        for key, value in updates.items()
        if value is not None and key not in ("id", "created_at", "updated_at")
    }


def sort_for_display(items: list) -> list:
    """Order by order_index ascending, ties broken by created_at descending."""
    newest_first = sorted(items, key=lambda item: item.created_at, reverse=True)
    return sorted(newest_first, key=lambda item: item.order_index)


class Storage(ABC):
    """
    Storage interface for catalog entities.

    Implementations log and swallow their own backend errors: list operations
    return an empty list, lookups and mutations return None, deletes return False.
    """

    def __init__(self):
        self._categories: Dict[str, CategoryResponse] = {}
        self._seed_categories()

    def _seed_categories(self) -> None:
        for category in DEFAULT_CATEGORIES:
            category_id = new_id()
            self._categories[category_id] = CategoryResponse(id=category_id, **category)

    async def get_categories(self) -> List[CategoryResponse]:
        return list(self._categories.values())

    async def get_category_by_slug(self, slug: str) -> Optional[CategoryResponse]:
        for category in self._categories.values():
            if category.slug == slug:
                return category
        return None

    async def ping(self) -> bool:
        """Return True if the backend is reachable."""
        return True

    # Products
    @abstractmethod
    async def get_products(self) -> List[ProductResponse]:
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[ProductResponse]:
        pass

    @abstractmethod
    async def create_product(self, data: ProductCreate) -> Optional[ProductResponse]:
        pass

    @abstractmethod
    async def update_product(self, product_id: str, updates: Dict[str, Any]) -> Optional[ProductResponse]:
        pass

    @abstractmethod
    async def delete_product(self, product_id: str) -> bool:
        pass

    # Gallery
    @abstractmethod
    async def get_gallery_items(self) -> List[GalleryItemResponse]:
        pass

    @abstractmethod
    async def get_gallery_item(self, item_id: str) -> Optional[GalleryItemResponse]:
        pass

    @abstractmethod
    async def create_gallery_item(self, data: GalleryItemCreate) -> Optional[GalleryItemResponse]:
        pass

    @abstractmethod
    async def update_gallery_item(self, item_id: str, updates: Dict[str, Any]) -> Optional[GalleryItemResponse]:
        pass

    @abstractmethod
    async def delete_gallery_item(self, item_id: str) -> bool:
        pass

    # Contact inquiries
    @abstractmethod
    async def get_contact_inquiries(self) -> List[ContactInquiryResponse]:
        pass

    @abstractmethod
    async def get_contact_inquiry(self, inquiry_id: str) -> Optional[ContactInquiryResponse]:
        pass

    @abstractmethod
    async def create_contact_inquiry(self, data: ContactInquiryCreate) -> Optional[ContactInquiryResponse]:
        pass

    @abstractmethod
    async def update_contact_inquiry_status(self, inquiry_id: str, status: str) -> Optional[ContactInquiryResponse]:
        pass

    @abstractmethod
    async def delete_contact_inquiry(self, inquiry_id: str) -> bool:
        pass
