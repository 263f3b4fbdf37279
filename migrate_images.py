#!/usr/bin/env python3
"""
Image Migration Script
Moves product and gallery images that are still served as static files
(/generated_images/..., /attached_assets/...) into the configured image sink.

Run with: python migrate_images.py [asset_dir ...]
"""
from pathlib import Path
from typing import Dict, Iterable, Optional
import argparse
import asyncio
import logging

from showroom.config import settings
from showroom.services.image_sinks import ImageSink
from showroom.services.storage import Storage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

LEGACY_PREFIXES = ("/generated_images/", "/attached_assets/")
DEFAULT_ASSET_DIRS = ("attached_assets/generated_images", "client/public/generated_images")
CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def find_image_file(filename: str, asset_dirs: Iterable[str]) -> Optional[Path]:
    """Return the first asset directory entry matching filename."""
    for directory in asset_dirs:
        candidate = Path(directory) / filename
        if candidate.is_file():
            return candidate
    return None


def needs_migration(record) -> bool:
    return not record.image_blob_id and record.image_path.startswith(LEGACY_PREFIXES)


async def _migrate_record(record, sink: ImageSink, asset_dirs: Iterable[str], record_type: str) -> Optional[dict]:
    filepath = find_image_file(record.image_filename, asset_dirs)
    if filepath is None:
        logger.warning(f"Image file not found for {record_type} {record.id}: {record.image_filename}")
        return None

    content_type = CONTENT_TYPES.get(filepath.suffix.lower())
    if content_type is None:
        logger.warning(f"Unsupported image type for {record_type} {record.id}: {filepath.name}")
        return None

    try:
        stored = await sink.save(
            filepath.read_bytes(),
            record.image_filename,
            content_type,
            metadata={"type": record_type, "category": record.category},
        )
    except Exception as e:
        logger.error(f"Failed to upload image for {record_type} {record.id}: {str(e)}", exc_info=True)
        return None
    logger.info(f"Uploaded {record_type} {record.id}: {record.image_path} -> {stored.path}")
    return {"image_path": stored.path, "image_blob_id": stored.blob_id}


async def _discard_blob(sink: ImageSink, blob_id: str, record_type: str, record_id: str):
    """Remove an uploaded blob whose record could not be repointed."""
    logger.error(f"Failed to update {record_type} {record_id}, removing uploaded image {blob_id}")
    try:
        await sink.delete(blob_id)
    except Exception as e:
        logger.error(f"Failed to remove orphaned image {blob_id}: {str(e)}", exc_info=True)


async def migrate_images(storage: Storage, sink: ImageSink, asset_dirs: Iterable[str] = DEFAULT_ASSET_DIRS) -> Dict[str, int]:
    """
    Upload legacy static images to the sink and repoint their records.

    Returns:
        Counts of migrated gallery items, products and skipped records
    """
    asset_dirs = list(asset_dirs)
    counts = {"gallery": 0, "products": 0, "skipped": 0}

    for item in await storage.get_gallery_items():
        if not needs_migration(item):
            continue
        updates = await _migrate_record(item, sink, asset_dirs, "gallery")
        if updates is None:
            counts["skipped"] += 1
        elif await storage.update_gallery_item(item.id, updates):
            counts["gallery"] += 1
        else:
            await _discard_blob(sink, updates["image_blob_id"], "gallery", item.id)
            counts["skipped"] += 1

    for product in await storage.get_products():
        if not needs_migration(product):
            continue
        updates = await _migrate_record(product, sink, asset_dirs, "product")
        if updates is None:
            counts["skipped"] += 1
        elif await storage.update_product(product.id, updates):
            counts["products"] += 1
        else:
            await _discard_blob(sink, updates["image_blob_id"], "product", product.id)
            counts["skipped"] += 1

    return counts


async def _run(asset_dirs):
    from showroom.dependencies import get_image_sink, get_storage

    if settings.STORAGE_BACKEND == "sql":
        from showroom.database import init_db
        await init_db()
    if settings.STORAGE_BACKEND == "mongo" or settings.IMAGE_SINK == "gridfs":
        from showroom.mongodb import init_mongo
        await init_mongo()

    counts = await migrate_images(get_storage(), get_image_sink(), asset_dirs)
    logger.info(
        f"Migration complete: {counts['gallery']} gallery items, "
        f"{counts['products']} products migrated, {counts['skipped']} skipped"
    )


def main():
    parser = argparse.ArgumentParser(description="Move static images into the configured image sink")
    parser.add_argument("asset_dirs", nargs="*", default=list(DEFAULT_ASSET_DIRS),
                        help="Directories searched for image files")
    args = parser.parse_args()
    asyncio.run(_run(args.asset_dirs))


if __name__ == "__main__":
    main()
