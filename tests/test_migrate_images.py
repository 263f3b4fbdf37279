import tempfile
import unittest
from pathlib import Path
from unittest import mock

from migrate_images import find_image_file, migrate_images, needs_migration
from showroom.schemas import GalleryItemCreate, ProductCreate
from showroom.services.image_sinks import DiskImageSink
from showroom.services.storage import MemoryStorage
from tests.helpers import make_png


class MigrateImagesTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        root = Path(self.tmpdir.name)
        self.assets = root / "assets"
        self.assets.mkdir()
        (self.assets / "lounge.png").write_bytes(make_png())
        (self.assets / "sofa.png").write_bytes(make_png(color=(10, 10, 10)))

        self.storage = MemoryStorage()
        self.uploads = root / "uploads"
        self.sink = DiskImageSink(str(self.uploads))

    async def asyncTearDown(self):
        self.tmpdir.cleanup()

    async def test_moves_legacy_images_into_sink(self):
        item = await self.storage.create_gallery_item(GalleryItemCreate(
            title="Lounge",
            category="curtains",
            image_filename="lounge.png",
            image_path="/generated_images/lounge.png",
        ))
        product = await self.storage.create_product(ProductCreate(
            name="Sofa",
            category="sofas",
            description="Three seater",
            image_filename="sofa.png",
            image_path="/attached_assets/sofa.png",
        ))

        counts = await migrate_images(self.storage, self.sink, [str(self.assets)])
        self.assertEqual(counts, {"gallery": 1, "products": 1, "skipped": 0})

        migrated = await self.storage.get_gallery_item(item.id)
        self.assertTrue(migrated.image_path.startswith("/api/images/"))
        blob = await self.sink.open(migrated.image_blob_id)
        self.assertEqual(blob.content_type, "image/png")

        migrated_product = await self.storage.get_product(product.id)
        self.assertIsNotNone(migrated_product.image_blob_id)

        again = await migrate_images(self.storage, self.sink, [str(self.assets)])
        self.assertEqual(again, {"gallery": 0, "products": 0, "skipped": 0})

    async def test_missing_files_are_skipped(self):
        item = await self.storage.create_gallery_item(GalleryItemCreate(
            title="Ghost",
            category="blinds",
            image_filename="ghost.png",
            image_path="/generated_images/ghost.png",
        ))
        counts = await migrate_images(self.storage, self.sink, [str(self.assets)])
        self.assertEqual(counts["skipped"], 1)
        self.assertEqual((await self.storage.get_gallery_item(item.id)).image_path, "/generated_images/ghost.png")

    async def create_legacy_records(self):
        item = await self.storage.create_gallery_item(GalleryItemCreate(
            title="Lounge",
            category="curtains",
            image_filename="lounge.png",
            image_path="/generated_images/lounge.png",
        ))
        product = await self.storage.create_product(ProductCreate(
            name="Sofa",
            category="sofas",
            description="Three seater",
            image_filename="sofa.png",
            image_path="/attached_assets/sofa.png",
        ))
        return item, product

    async def test_upload_failure_skips_only_that_record(self):
        item, product = await self.create_legacy_records()
        real_save = self.sink.save

        async def flaky_save(data, filename, content_type, metadata=None):
            if filename == "lounge.png":
                raise OSError("disk full")
            return await real_save(data, filename, content_type, metadata=metadata)

        with mock.patch.object(self.sink, "save", side_effect=flaky_save):
            counts = await migrate_images(self.storage, self.sink, [str(self.assets)])

        self.assertEqual(counts, {"gallery": 0, "products": 1, "skipped": 1})
        self.assertEqual((await self.storage.get_gallery_item(item.id)).image_path, "/generated_images/lounge.png")
        self.assertIsNotNone((await self.storage.get_product(product.id)).image_blob_id)

    async def test_failed_record_update_removes_uploaded_image(self):
        item, product = await self.create_legacy_records()

        with mock.patch.object(self.storage, "update_gallery_item", return_value=None):
            counts = await migrate_images(self.storage, self.sink, [str(self.assets)])

        self.assertEqual(counts, {"gallery": 0, "products": 1, "skipped": 1})
        self.assertIsNone((await self.storage.get_gallery_item(item.id)).image_blob_id)
        product_blob = (await self.storage.get_product(product.id)).image_blob_id
        self.assertEqual([p.name for p in self.uploads.iterdir()], [product_blob])

    def test_helpers(self):
        self.assertEqual(find_image_file("lounge.png", ["missing-dir", str(self.assets)]), self.assets / "lounge.png")
        self.assertIsNone(find_image_file("nope.png", [str(self.assets)]))

        record = GalleryItemCreate(
            title="x", category="y", image_filename="a.png", image_path="/api/images/abc.png", image_blob_id="abc.png"
        )
        self.assertFalse(needs_migration(record))
        self.assertTrue(needs_migration(record.model_copy(update={
            "image_path": "/generated_images/a.png", "image_blob_id": None
        })))


if __name__ == "__main__":
    unittest.main()
