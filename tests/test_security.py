import time
import unittest

import jwt

from evstations.auth.security import (
    cookie_settings,
    decode_token,
    hash_password,
    make_token,
    verify_password,
    verify_token,
)
from evstations.auth.session import is_public_path
from evstations.config import get_settings


class PasswordTests(unittest.TestCase):
    def test_hash_roundtrip(self):
        hashed = hash_password("s3cret!")
        self.assertNotEqual(hashed, "s3cret!")
        self.assertTrue(verify_password("s3cret!", hashed))
        self.assertFalse(verify_password("other", hashed))

    def test_garbage_hash_is_rejected(self):
        self.assertFalse(verify_password("s3cret!", "not-a-hash"))


class TokenTests(unittest.TestCase):
    def test_token_carries_user(self):
        token = make_token("6549a9282a301f2d1c1a7f01", "ana@example.com")
        self.assertEqual(verify_token(token), "6549a9282a301f2d1c1a7f01")
        self.assertEqual(decode_token(token)["email"], "ana@example.com")

    def test_expired_token(self):
        settings = get_settings()
        past = int(time.time()) - 10
        token = jwt.encode({"sub": "x", "iat": past - 10, "exp": past}, settings.jwt_secret, algorithm=settings.jwt_alg)
        self.assertIsNone(verify_token(token))

    def test_foreign_signature(self):
        token = jwt.encode({"sub": "x"}, "another-secret-with-enough-length", algorithm="HS256")
        self.assertIsNone(verify_token(token))

    def test_cookie_not_secure_outside_production(self):
        ck = cookie_settings()
        self.assertTrue(ck["httponly"])
        self.assertFalse(ck["secure"])
        self.assertEqual(ck["max_age"], 7 * 24 * 60 * 60)


class PublicPathTests(unittest.TestCase):
    def test_paths(self):
        self.assertTrue(is_public_path("/api/auth/login"))
        self.assertTrue(is_public_path("/api/charging-stations/seed"))
        self.assertTrue(is_public_path("/docs"))
        self.assertFalse(is_public_path("/api/auth/me"))
        self.assertFalse(is_public_path("/api/charging-stations"))


if __name__ == "__main__":
    unittest.main()
