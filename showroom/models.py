"""
SQLAlchemy models for the SQL storage backend.
All database models inherit from Base (declarative base).
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from showroom.database import Base


class Product(Base):
    """
    Catalog product.
    Stores descriptive fields plus the location of its image in the blob sink.
    """
    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    image_filename = Column(String, nullable=False)
    image_path = Column(String, nullable=False)
    image_blob_id = Column(String, nullable=True)
    order_index = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class GalleryItem(Base):
    """Gallery image with title and category."""
    __tablename__ = "gallery_items"

    id = Column(String(36), primary_key=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    image_filename = Column(String, nullable=False)
    image_path = Column(String, nullable=False)
    image_blob_id = Column(String, nullable=True)
    order_index = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class ContactInquiry(Base):
    __tablename__ = "contact_inquiries"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    service = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="unread")
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
