"""Tests for password hashing, session tokens and reset-token helpers."""

import unittest

import jwt
from pydantic import SecretStr

from app.core.security import (
    constant_time_equals,
    create_session_token,
    decode_session_token,
    generate_provisional_password,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from tests.support import make_settings


class TestPasswords(unittest.TestCase):
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("segredo1")
        self.assertNotEqual(hashed, "segredo1")
        self.assertTrue(verify_password("segredo1", hashed))
        self.assertFalse(verify_password("segredo2", hashed))

    def test_verify_against_garbage_hash(self) -> None:
        self.assertFalse(verify_password("segredo1", "not-a-hash"))

    def test_provisional_password_shape(self) -> None:
        password = generate_provisional_password()
        self.assertEqual(len(password), 8)
        self.assertTrue(password.isalnum())


class TestSessionToken(unittest.TestCase):
    def test_round_trip_claims(self) -> None:
        settings = make_settings()
        token = create_session_token(settings, "user-1", "leader", "prov-1")
        payload = decode_session_token(settings, token)
        self.assertEqual(payload["sub"], "user-1")
        self.assertEqual(payload["role"], "leader")
        self.assertEqual(payload["province"], "prov-1")

    def test_wrong_secret_rejected(self) -> None:
        token = create_session_token(make_settings(), "user-1", "admin", "prov-1")
        other = make_settings(JWT_SECRET=SecretStr("another-secret"))
        with self.assertRaises(jwt.PyJWTError):
            decode_session_token(other, token)


class TestResetTokens(unittest.TestCase):
    def test_token_is_64_hex_chars_and_hash_differs(self) -> None:
        token = generate_reset_token()
        self.assertEqual(len(token), 64)
        int(token, 16)
        self.assertNotEqual(hash_reset_token(token), token)
        self.assertEqual(hash_reset_token(token), hash_reset_token(token))

    def test_constant_time_equals(self) -> None:
        self.assertTrue(constant_time_equals("a@example.org", "a@example.org"))
        self.assertFalse(constant_time_equals("a@example.org", "b@example.org"))


if __name__ == "__main__":
    unittest.main()
