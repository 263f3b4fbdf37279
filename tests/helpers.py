import io
import tempfile

import bcrypt
from fastapi.testclient import TestClient
from PIL import Image

from showroom.config import settings
from showroom.dependencies import get_image_sink, get_storage
from showroom.main import app
from showroom.services.image_sinks import DiskImageSink
from showroom.services.storage import MemoryStorage
from showroom.utils.rate_limit import limiter
from showroom.utils.session import session_store

ADMIN_PASSWORD = "correct horse battery staple"
# Low cost factor keeps the login tests fast
ADMIN_PASSWORD_HASH = bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


def make_png(size=(8, 8), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class ApiTestMixin:
    """Wires the app to a fresh memory backend and a temporary disk sink."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.storage = MemoryStorage()
        self.sink = DiskImageSink(self.tmpdir.name)
        app.dependency_overrides[get_storage] = lambda: self.storage
        app.dependency_overrides[get_image_sink] = lambda: self.sink

        self._original_hash = settings.ADMIN_PASSWORD_HASH
        settings.ADMIN_PASSWORD_HASH = ADMIN_PASSWORD_HASH
        self._limiter_enabled = limiter.enabled
        limiter.enabled = False
        session_store.clear()

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        settings.ADMIN_PASSWORD_HASH = self._original_hash
        limiter.enabled = self._limiter_enabled
        session_store.clear()
        self.tmpdir.cleanup()

    def login(self):
        response = self.client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
        self.assertEqual(response.status_code, 200)
        return response

    def upload_gallery_image(self, title="Living room", category="curtains", data=None):
        return self.client.post(
            "/api/admin/gallery/upload",
            data={"title": title, "category": category},
            files={"image": ("room.png", data or make_png(), "image/png")},
        )

    def upload_product(self, name="Orthopedic mattress", category="mattresses", description="Firm support"):
        return self.client.post(
            "/api/admin/products/upload",
            data={"name": name, "category": category, "description": description},
            files={"image": ("mattress.png", make_png(), "image/png")},
        )
