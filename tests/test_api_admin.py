import asyncio
import unittest

from showroom.config import settings
from showroom.schemas import ContactInquiryCreate
from showroom.utils.rate_limit import limiter
from tests.helpers import ApiTestMixin


class AdminSessionTests(ApiTestMixin, unittest.TestCase):
    def test_login_sets_httponly_cookie(self):
        response = self.login()
        self.assertEqual(response.json(), {"success": True})
        cookie_header = response.headers["set-cookie"]
        self.assertIn(settings.SESSION_COOKIE_NAME, cookie_header)
        self.assertIn("HttpOnly", cookie_header)
        self.assertIn("samesite=lax", cookie_header.lower())

    def test_wrong_password_is_401(self):
        response = self.client.post("/api/admin/login", json={"password": "guess"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Invalid password")
        self.assertNotIn("set-cookie", response.headers)

    def test_empty_password_is_401(self):
        response = self.client.post("/api/admin/login", json={})
        self.assertEqual(response.status_code, 401)

    def test_login_without_configured_hash_is_500(self):
        settings.ADMIN_PASSWORD_HASH = ""
        response = self.client.post("/api/admin/login", json={"password": "anything"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Admin password not configured")

    def test_check_reflects_session(self):
        self.assertEqual(self.client.get("/api/admin/check").status_code, 401)

        self.login()
        response = self.client.get("/api/admin/check")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"authenticated": True})

    def test_logout_ends_session(self):
        self.login()
        response = self.client.post("/api/admin/logout")
        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get("/api/admin/check").status_code, 401)
        self.assertEqual(self.client.get("/api/admin/enquiries").status_code, 401)

    def test_logout_without_session_succeeds(self):
        self.assertEqual(self.client.post("/api/admin/logout").status_code, 200)

    def test_tampered_cookie_is_rejected(self):
        self.client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-signed-token")
        self.assertEqual(self.client.get("/api/admin/check").status_code, 401)

    def test_login_is_rate_limited(self):
        limiter.enabled = True
        limiter.reset()
        try:
            statuses = [
                self.client.post("/api/admin/login", json={"password": "guess"}).status_code
                for _ in range(6)
            ]
        finally:
            limiter.reset()
        self.assertEqual(statuses[:5], [401] * 5)
        self.assertEqual(statuses[5], 429)

    def test_forwarded_for_header_does_not_reset_login_limit(self):
        limiter.enabled = True
        limiter.reset()
        try:
            statuses = [
                self.client.post(
                    "/api/admin/login",
                    json={"password": "guess"},
                    headers={"X-Forwarded-For": f"10.0.0.{i}"},
                ).status_code
                for i in range(10)
            ]
        finally:
            limiter.reset()
        self.assertEqual(statuses[:5], [401] * 5)
        self.assertEqual(statuses[5:], [429] * 5)

    def test_admin_routes_require_session(self):
        checks = [
            ("get", "/api/admin/enquiries"),
            ("put", "/api/admin/enquiries/some-id"),
            ("delete", "/api/admin/enquiries/some-id"),
            ("post", "/api/admin/gallery/upload"),
            ("put", "/api/admin/gallery/some-id"),
            ("delete", "/api/admin/gallery/some-id"),
            ("post", "/api/admin/products/upload"),
            ("put", "/api/admin/products/some-id"),
            ("delete", "/api/admin/products/some-id"),
        ]
        for method, path in checks:
            with self.subTest(method=method, path=path):
                response = self.client.request(method.upper(), path, json={})
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["error"], "Unauthorized")


class EnquiryAdminTests(ApiTestMixin, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.inquiry = asyncio.run(self.storage.create_contact_inquiry(ContactInquiryCreate(
            name="Ravi",
            email="ravi@example.com",
            phone="12345",
            service="Flooring",
            message="Vinyl flooring quote please",
        )))
        self.login()

    def test_list_enquiries(self):
        response = self.client.get("/api/admin/enquiries")
        self.assertEqual(response.status_code, 200)
        enquiries = response.json()
        self.assertEqual(len(enquiries), 1)
        self.assertEqual(enquiries[0]["status"], "unread")

    def test_update_status(self):
        response = self.client.put(f"/api/admin/enquiries/{self.inquiry.id}", json={"status": "responded"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "responded")
        self.assertEqual(self.storage.inquiries[self.inquiry.id].status, "responded")

    def test_invalid_status_is_400(self):
        response = self.client.put(f"/api/admin/enquiries/{self.inquiry.id}", json={"status": "archived"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.storage.inquiries[self.inquiry.id].status, "unread")

    def test_update_unknown_enquiry_is_404(self):
        response = self.client.put("/api/admin/enquiries/missing", json={"status": "read"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Enquiry not found")

    def test_delete_enquiry(self):
        response = self.client.delete(f"/api/admin/enquiries/{self.inquiry.id}")
        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get("/api/admin/enquiries").json(), [])

        again = self.client.delete(f"/api/admin/enquiries/{self.inquiry.id}")
        self.assertEqual(again.status_code, 404)


if __name__ == "__main__":
    unittest.main()
