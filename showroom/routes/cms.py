"""
Admin CMS routes for products and gallery items.
All endpoints require an admin session.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from typing import Optional
import logging

from showroom.dependencies import get_image_sink, get_storage
from showroom.schemas import GalleryItemCreate, GalleryItemUpdate, ProductCreate, ProductUpdate
from showroom.services.image_sinks import ImageSink, StoredImage
from showroom.services.storage import Storage
from showroom.utils.rate_limit import RATE_LIMITS, limiter
from showroom.utils.session import require_admin
from showroom.utils.uploads import read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


async def _store_image(sink: ImageSink, file: Optional[UploadFile], metadata: dict) -> tuple[StoredImage, str]:
    """
    Validate an upload and persist it to the configured sink.

    Returns:
        Tuple of (stored image, original filename)

    Raises:
        HTTPException: 400/413 for invalid uploads, 500 if the sink fails
    """
    data, filename, content_type = await read_image_upload(file)
    try:
        stored = await sink.save(data, filename, content_type, metadata=metadata)
    except Exception as e:
        logger.error(f"Error saving {filename} to {sink.name} sink: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image"
        )
    return stored, filename


async def _delete_image(sink: ImageSink, image_path: str, blob_id: Optional[str]) -> None:
    """Delete the blob behind a record. Missing blobs and sink errors are logged, not raised."""
    target = sink.blob_id_for(image_path, blob_id)
    if not target:
        logger.info(f"No stored blob for {image_path}, skipping image deletion")
        return
    try:
        if not await sink.delete(target):
            logger.warning(f"Image {target} was not found in {sink.name} sink")
    except Exception as e:
        logger.error(f"Failed to delete image {target} from {sink.name} sink: {str(e)}", exc_info=True)


def _missing(*values: Optional[str]) -> bool:
    return any(not value or not value.strip() for value in values)


@router.post("/gallery/upload")
@limiter.limit(RATE_LIMITS["upload"])
async def upload_gallery_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    storage: Storage = Depends(get_storage),
    sink: ImageSink = Depends(get_image_sink)
):
    """
    Upload a gallery image with its title and category.

    Raises:
        HTTPException: 400 if the file or fields are invalid, 500 if upload or save fails
    """
    if _missing(title, category):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and category are required"
        )

    stored, filename = await _store_image(sink, image, {"type": "gallery", "category": category})

    item = await storage.create_gallery_item(GalleryItemCreate(
        title=title.strip(),
        category=category.strip(),
        image_filename=filename,
        image_path=stored.path,
        image_blob_id=stored.blob_id,
        order_index=0,
    ))
    if not item:
        await _delete_image(sink, stored.path, stored.blob_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image"
        )

    logger.info(f"Uploaded gallery item {item.id} ({filename})")
    return {"success": True, "item": item}


@router.put("/gallery/{item_id}")
async def update_gallery_item(
    item_id: str,
    item_update: GalleryItemUpdate,
    storage: Storage = Depends(get_storage)
):
    """
    Update a gallery item's title, category or order_index.

    Raises:
        HTTPException: 404 if the item does not exist
    """
    item = await storage.update_gallery_item(item_id, item_update.model_dump(exclude_unset=True))
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gallery item not found"
        )
    logger.info(f"Updated gallery item {item_id}")
    return {"success": True, "item": item}


@router.delete("/gallery/{item_id}")
async def delete_gallery_item(
    item_id: str,
    storage: Storage = Depends(get_storage),
    sink: ImageSink = Depends(get_image_sink)
):
    """
    Delete a gallery item and its stored image.

    Raises:
        HTTPException: 404 if the item does not exist
    """
    item = await storage.get_gallery_item(item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gallery item not found"
        )

    await _delete_image(sink, item.image_path, item.image_blob_id)

    if not await storage.delete_gallery_item(item_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete gallery item"
        )
    logger.info(f"Deleted gallery item {item_id}")
    return {"success": True}


@router.post("/products/upload")
@limiter.limit(RATE_LIMITS["upload"])
async def upload_product(
    request: Request,
    image: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    storage: Storage = Depends(get_storage),
    sink: ImageSink = Depends(get_image_sink)
):
    """
    Create a product from an uploaded image and its fields.

    Raises:
        HTTPException: 400 if the file or fields are invalid, 500 if upload or save fails
    """
    if _missing(name, category, description):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields"
        )

    stored, filename = await _store_image(sink, image, {"type": "product", "category": category})

    product = await storage.create_product(ProductCreate(
        name=name.strip(),
        category=category.strip(),
        description=description.strip(),
        image_filename=filename,
        image_path=stored.path,
        image_blob_id=stored.blob_id,
        order_index=0,
    ))
    if not product:
        await _delete_image(sink, stored.path, stored.blob_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload product"
        )

    logger.info(f"Uploaded product {product.id} ({filename})")
    return {"success": True, "product": product}


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    product_update: ProductUpdate,
    storage: Storage = Depends(get_storage)
):
    """
    Update a product's name, category, description or order_index.

    Raises:
        HTTPException: 404 if the product does not exist
    """
    product = await storage.update_product(product_id, product_update.model_dump(exclude_unset=True))
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    logger.info(f"Updated product {product_id}")
    return {"success": True, "product": product}


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    storage: Storage = Depends(get_storage),
    sink: ImageSink = Depends(get_image_sink)
):
    """
    Delete a product and its stored image.

    Raises:
        HTTPException: 404 if the product does not exist
    """
    product = await storage.get_product(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )

    await _delete_image(sink, product.image_path, product.image_blob_id)

    if not await storage.delete_product(product_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete product"
        )
    logger.info(f"Deleted product {product_id}")
    return {"success": True}
