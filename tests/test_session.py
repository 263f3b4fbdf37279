import unittest
from datetime import datetime, timedelta, timezone

from jose import jwt

from showroom.config import settings
from showroom.utils.auth import hash_password, verify_password
from showroom.utils.session import (
    ALGORITHM,
    SessionStore,
    decode_session_cookie,
    encode_session_cookie,
)


class SessionStoreTests(unittest.TestCase):
    def test_create_get_destroy(self):
        store = SessionStore(max_age_seconds=60)
        session_id, data = store.create(admin=True)
        self.assertTrue(data.admin)
        self.assertIs(store.get(session_id), data)

        self.assertTrue(store.destroy(session_id))
        self.assertIsNone(store.get(session_id))
        self.assertFalse(store.destroy(session_id))

    def test_expired_sessions_are_dropped(self):
        store = SessionStore(max_age_seconds=60)
        session_id, data = store.create(admin=True)
        data.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        self.assertIsNone(store.get(session_id))
        self.assertFalse(store.destroy(session_id))

    def test_session_ids_are_unique(self):
        store = SessionStore(max_age_seconds=60)
        ids = {store.create()[0] for _ in range(50)}
        self.assertEqual(len(ids), 50)


class SessionCookieTests(unittest.TestCase):
    def test_round_trip(self):
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = encode_session_cookie("abc123", expires_at)
        self.assertEqual(decode_session_cookie(token), "abc123")

    def test_expired_token(self):
        expires_at = datetime.now(timezone.utc) - timedelta(minutes=5)
        self.assertIsNone(decode_session_cookie(encode_session_cookie("abc123", expires_at)))

    def test_wrong_signature(self):
        token = jwt.encode(
            {"sid": "abc123", "type": "session", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.JWT_SECRET_KEY + "-other",
            algorithm=ALGORITHM,
        )
        self.assertIsNone(decode_session_cookie(token))

    def test_wrong_token_type(self):
        token = jwt.encode(
            {"sid": "abc123", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.JWT_SECRET_KEY,
            algorithm=ALGORITHM,
        )
        self.assertIsNone(decode_session_cookie(token))

    def test_garbage(self):
        self.assertIsNone(decode_session_cookie("garbage"))


class PasswordTests(unittest.TestCase):
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret")
        self.assertTrue(hashed.startswith("$2b$12$"))
        self.assertTrue(verify_password("s3cret", hashed))
        self.assertFalse(verify_password("wrong", hashed))

    def test_malformed_hash(self):
        self.assertFalse(verify_password("s3cret", "not-a-bcrypt-hash"))


if __name__ == "__main__":
    unittest.main()
