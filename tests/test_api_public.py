import asyncio
import unittest
from datetime import timedelta
from unittest import mock

from showroom.schemas import GalleryItemCreate, ProductCreate
from tests.helpers import ApiTestMixin, make_png


def run(coro):
    return asyncio.run(coro)


class PublicApiTests(ApiTestMixin, unittest.TestCase):
    def _create_product(self, name, order_index=0):
        return run(self.storage.create_product(ProductCreate(
            name=name,
            category="sofas",
            description=f"{name} description",
            image_filename=f"{name}.jpg",
            image_path=f"/generated_images/{name}.jpg",
            order_index=order_index,
        )))

    def test_root_and_health(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

        self.assertEqual(self.client.get("/health").json(), {"status": "healthy"})

        db = self.client.get("/health/db").json()
        self.assertEqual(db["database"], "connected")
        self.assertEqual(db["status"], "healthy")

    def test_categories_are_seeded(self):
        response = self.client.get("/api/categories")
        self.assertEqual(response.status_code, 200)
        slugs = [c["slug"] for c in response.json()]
        self.assertEqual(len(slugs), 8)
        self.assertIn("artificial-grass", slugs)

        category = self.client.get("/api/categories/mattresses")
        self.assertEqual(category.status_code, 200)
        self.assertEqual(category.json()["name"], "Mattresses")

    def test_unknown_category_is_404(self):
        response = self.client.get("/api/categories/spaceships")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Category not found")

    def test_products_empty_then_listed(self):
        self.assertEqual(self.client.get("/api/products").json(), [])

        product = self._create_product("chesterfield")
        listed = self.client.get("/api/products").json()
        self.assertEqual([p["id"] for p in listed], [product.id])

        detail = self.client.get(f"/api/products/{product.id}")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["name"], "chesterfield")

    def test_unknown_product_is_404(self):
        response = self.client.get("/api/products/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Product not found")

    def test_products_ordered_by_order_index_then_newest(self):
        second = self._create_product("recliner", order_index=1)
        first = self._create_product("futon", order_index=0)
        older = self._create_product("divan", order_index=0)
        # Push one record back in time to make the tie-break deterministic
        stored = self.storage.products[older.id]
        self.storage.products[older.id] = stored.model_copy(
            update={"created_at": stored.created_at - timedelta(days=1)}
        )

        ids = [p["id"] for p in self.client.get("/api/products").json()]
        self.assertEqual(ids, [first.id, older.id, second.id])

    def test_gallery_list_and_detail(self):
        item = run(self.storage.create_gallery_item(GalleryItemCreate(
            title="Bay window",
            category="blinds",
            image_filename="bay.jpg",
            image_path="/generated_images/bay.jpg",
        )))

        listed = self.client.get("/api/gallery").json()
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0]["title"], "Bay window")

        self.assertEqual(self.client.get(f"/api/gallery/{item.id}").status_code, 200)
        missing = self.client.get("/api/gallery/nope")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["error"], "Gallery item not found")

    def test_uploaded_image_is_streamed_back(self):
        data = make_png(size=(16, 16))
        self.login()
        item = self.upload_gallery_image(data=data).json()["item"]

        response = self.client.get(item["image_path"])
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, data)
        self.assertEqual(response.headers["content-type"], "image/png")
        self.assertEqual(response.headers["cache-control"], "public, max-age=31536000")
        self.assertIn("inline", response.headers["content-disposition"])

    def test_unknown_image_is_404(self):
        response = self.client.get("/api/images/0123456789abcdef0123456789abcdef.png")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Image not found")

        traversal = self.client.get("/api/images/..%2F..%2Fetc%2Fpasswd")
        self.assertEqual(traversal.status_code, 404)


class ContactApiTests(ApiTestMixin, unittest.TestCase):
    payload = {
        "name": "Asha",
        "email": "asha@example.com",
        "phone": "+91 98765 43210",
        "service": "Curtains",
        "message": "Need curtains for three windows",
    }

    @mock.patch("showroom.routes.contact.send_contact_inquiry_email")
    def test_submit_inquiry(self, send_email):
        response = self.client.post("/api/contact", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertIn("inquiryId", body)

        inquiry = self.storage.inquiries[body["inquiryId"]]
        self.assertEqual(inquiry.status, "unread")
        self.assertEqual(inquiry.name, "Asha")
        send_email.assert_called_once()

    @mock.patch("showroom.routes.contact.send_contact_inquiry_email")
    def test_missing_field_is_400(self, send_email):
        payload = dict(self.payload)
        del payload["phone"]
        response = self.client.post("/api/contact", json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Validation error")
        self.assertEqual(self.storage.inquiries, {})
        send_email.assert_not_called()

    @mock.patch("showroom.routes.contact.send_contact_inquiry_email")
    def test_blank_field_is_400(self, send_email):
        response = self.client.post("/api/contact", json={**self.payload, "message": "   "})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.storage.inquiries, {})

    @mock.patch("showroom.routes.contact.send_contact_inquiry_email", return_value=False)
    def test_email_failure_does_not_fail_submission(self, send_email):
        response = self.client.post("/api/contact", json=self.payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(self.storage.inquiries), 1)

    def test_storage_failure_is_500(self):
        with mock.patch.object(self.storage, "create_contact_inquiry", return_value=None):
            response = self.client.post("/api/contact", json=self.payload)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Failed to submit inquiry")


if __name__ == "__main__":
    unittest.main()
