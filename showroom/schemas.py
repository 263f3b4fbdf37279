"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints and the records returned by storage backends.
"""
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Optional, Literal

InquiryStatus = Literal["unread", "read", "responded"]


class CategoryResponse(BaseModel):
    """Static product category, seeded at startup."""
    id: str
    name: str
    slug: str
    description: str
    icon: str


class ProductResponse(BaseModel):
    """
    Response schema for product data.
    Used by GET /api/products and the admin product endpoints.
    """
    id: str
    name: str
    category: str
    description: str
    image_filename: str
    image_path: str
    image_blob_id: Optional[str] = None
    order_index: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True  # Enable conversion from SQLAlchemy models
    )


class ProductCreate(BaseModel):
    """Fields supplied by the upload handler when creating a product."""
    name: str
    category: str
    description: str
    image_filename: str
    image_path: str
    image_blob_id: Optional[str] = None
    order_index: int = 0


class ProductUpdate(BaseModel):
    """
    Request schema for PUT /api/admin/products/{id}.
    Omitted fields are left unchanged.
    """
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    order_index: Optional[int] = None


class GalleryItemResponse(BaseModel):
    """
    Response schema for gallery items.
    Used by GET /api/gallery and the admin gallery endpoints.
    """
    id: str
    title: str
    category: str
    image_filename: str
    image_path: str
    image_blob_id: Optional[str] = None
    order_index: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )


class GalleryItemCreate(BaseModel):
    title: str
    category: str
    image_filename: str
    image_path: str
    image_blob_id: Optional[str] = None
    order_index: int = 0


class GalleryItemUpdate(BaseModel):
    """
    Request schema for PUT /api/admin/gallery/{id}.
    Omitted fields are left unchanged.
    """
    title: Optional[str] = None
    category: Optional[str] = None
    order_index: Optional[int] = None


class ContactInquiryCreate(BaseModel):
    """
    Request schema for POST /api/contact.
    Every field is required and must not be blank.
    """
    name: str
    email: str
    phone: str
    service: str
    message: str

    @field_validator('name', 'email', 'phone', 'service', 'message')
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError('Field is required')
        return v.strip()


class ContactInquiryResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    service: str
    message: str
    status: InquiryStatus = "unread"
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )


class ContactSubmissionResponse(BaseModel):
    """Response for a successful contact form submission."""
    success: bool = True
    message: str
    inquiryId: str


class InquiryStatusUpdate(BaseModel):
    """Request schema for PUT /api/admin/enquiries/{id}."""
    status: InquiryStatus


class LoginRequest(BaseModel):
    password: str = ""
