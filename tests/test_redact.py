"""Tests for one-way redaction."""

import re

from agentctx.core.redact import redact, redacted_fields, sha256_hex, utf16_length

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestRedact:
    def test_empty_string(self):
        r = redact("")
        assert r.sha256 == EMPTY_SHA256
        assert r.length == 0

    def test_known_digest_is_utf8(self):
        assert sha256_hex("hello") == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_digest_is_lowercase_hex(self):
        assert re.fullmatch(r"[0-9a-f]{64}", redact("Secret Meeting").sha256)

    def test_repeated_calls_identical(self):
        assert redact("token-123") == redact("token-123")

    def test_digest_never_contains_input(self):
        for value in ("secret", "hunter2", "Dentist at 3pm"):
            assert value not in redact(value).sha256

    def test_length_counts_utf16_code_units(self):
        assert utf16_length("abc") == 3
        assert utf16_length("é") == 1
        assert utf16_length("😀") == 2
        assert redact("a😀").length == 3


class TestRedactedFields:
    def test_redacted_emits_only_digest_and_length(self):
        fields = redacted_fields("title", "Dentist", redact_enabled=True)
        assert set(fields) == {"title_sha256", "title_length"}
        assert "Dentist" not in fields.values()
        assert fields["title_length"] == 7

    def test_plain_emits_value_and_length(self):
        assert redacted_fields("text", "hi", redact_enabled=False) == {"text": "hi", "text_length": 2}


class TestSurrogates:
    def test_lone_high_surrogate(self):
        r = redact("\ud83d")
        assert r.sha256 == sha256_hex("\ufffd")
        assert r.length == 1

    def test_lone_surrogates_inside_text(self):
        assert redact("a\ud83db") == redact("a\ufffdb")
        assert redact("x\ude00").length == 2

    def test_split_pair_hashes_like_joined_character(self):
        r = redact("\ud83d\ude00")
        assert r.sha256 == sha256_hex("\U0001f600")
        assert r.length == 2

    def test_redacted_fields_accepts_any_string(self):
        fields = redacted_fields("title", "Pay \udc00 rent", redact_enabled=True)
        assert fields["title_length"] == 10
