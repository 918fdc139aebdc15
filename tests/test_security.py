"""Unit tests for portal.core.security: email normalization and bcrypt hashing."""

import unittest

from portal.core.security import (
    hash_password,
    is_strong_enough,
    normalize_email,
    verify_password,
)


class TestNormalizeEmail(unittest.TestCase):
    """normalize_email trims and lower-cases; applying it twice changes nothing."""

    def test_trims_and_lowercases(self) -> None:
        self.assertEqual(normalize_email("  Ana@X.com "), "ana@x.com")

    def test_idempotent(self) -> None:
        for raw in ("Ana@X.com", " ana@x.com\t", "ANA@X.COM  ", "ana@x.com"):
            once = normalize_email(raw)
            self.assertEqual(normalize_email(once), once)

    def test_none_becomes_empty(self) -> None:
        self.assertEqual(normalize_email(None), "")


class TestPasswordHashing(unittest.TestCase):
    def test_round_trip(self) -> None:
        hashed = hash_password("secret1")
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(verify_password("secret1", hashed))

    def test_other_password_rejected(self) -> None:
        hashed = hash_password("secret1")
        self.assertFalse(verify_password("secret2", hashed))

    def test_hashes_are_salted(self) -> None:
        self.assertNotEqual(hash_password("secret1"), hash_password("secret1"))

    def test_malformed_hash_is_not_an_error(self) -> None:
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))


class TestPasswordStrength(unittest.TestCase):
    def test_minimum_length_is_six(self) -> None:
        self.assertFalse(is_strong_enough("12345"))
        self.assertTrue(is_strong_enough("123456"))


if __name__ == "__main__":
    unittest.main()
