"""Tests for the password digest."""

import hashlib

from ljkit.protocol.digest import md5_hex_digest


class TestMd5HexDigest:

    def test_known_value(self):
        assert md5_hex_digest("secret") == "5ebe2294ecd0e0f08eab7690d2a6ee69"

    def test_empty_string(self):
        assert md5_hex_digest("") == "d41d8cd98f00b204e9800998ecf8427e"

    def test_deterministic(self):
        assert md5_hex_digest("hunter2") == md5_hex_digest("hunter2")

    def test_fixed_length_lowercase_hex(self):
        for text in ("a", "pässwörd", "x" * 1000):
            digest = md5_hex_digest(text)
            assert len(digest) == 32
            assert digest == digest.lower()
            int(digest, 16)

    def test_non_ascii_is_hashed_as_utf8(self):
        expected = hashlib.md5("пароль".encode("utf-8")).hexdigest()
        assert md5_hex_digest("пароль") == expected
