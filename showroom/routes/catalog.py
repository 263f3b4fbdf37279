"""
Public catalog routes.
Unauthenticated reads for products, categories, gallery items and stored images.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from typing import List
from urllib.parse import quote
import logging

from showroom.dependencies import get_image_sink, get_storage
from showroom.schemas import CategoryResponse, GalleryItemResponse, ProductResponse
from showroom.services.image_sinks import ImageSink
from showroom.services.storage import Storage

logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

IMAGE_CACHE_CONTROL = "public, max-age=31536000"  # Blob ids never change content


@router.get("/products", response_model=List[ProductResponse])
async def get_products(storage: Storage = Depends(get_storage)):
    """
    Get all products.
    Ordered by order_index ascending, newest first within the same order_index.
    """
    products = await storage.get_products()
    logger.info(f"Retrieved {len(products)} products")
    return products


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, storage: Storage = Depends(get_storage)):
    """
    Get a single product.

    Raises:
        HTTPException: 404 if the product does not exist
    """
    product = await storage.get_product(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return product


@router.get("/categories", response_model=List[CategoryResponse])
async def get_categories(storage: Storage = Depends(get_storage)):
    return await storage.get_categories()


@router.get("/categories/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, storage: Storage = Depends(get_storage)):
    category = await storage.get_category_by_slug(slug)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    return category


@router.get("/gallery", response_model=List[GalleryItemResponse])
async def get_gallery_items(storage: Storage = Depends(get_storage)):
    """
    Get all gallery items.
    Ordered by order_index ascending, newest first within the same order_index.
    """
    items = await storage.get_gallery_items()
    logger.info(f"Retrieved {len(items)} gallery items")
    return items


@router.get("/gallery/{item_id}", response_model=GalleryItemResponse)
async def get_gallery_item(item_id: str, storage: Storage = Depends(get_storage)):
    item = await storage.get_gallery_item(item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gallery item not found"
        )
    return item


@router.get("/images/{image_id}")
async def get_image(image_id: str, sink: ImageSink = Depends(get_image_sink)):
    """
    Stream an image held by the disk or GridFS sink.
    Images stored on a CDN are served from their URL instead and 404 here.

    Raises:
        HTTPException: 404 if the image is unknown, 500 if the sink fails
    """
    try:
        blob = await sink.open(image_id)
    except Exception as e:
        logger.error(f"Error opening image {image_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to serve image"
        )

    if blob is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found"
        )

    return StreamingResponse(
        blob.chunks,
        media_type=blob.content_type,
        headers={
            "Content-Length": str(blob.length),
            "Content-Disposition": f"inline; filename*=UTF-8''{quote(blob.filename)}",
            "Cache-Control": IMAGE_CACHE_CONTROL,
        },
    )
