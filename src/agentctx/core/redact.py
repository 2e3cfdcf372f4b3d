"""One-way redaction of sensitive strings."""

import hashlib
from dataclasses import dataclass


@dataclass(frozen=True)
class Redacted:
    """Digest and length standing in for a sensitive string."""

    sha256: str
    length: int


def _utf16(text: str) -> bytes:
    # surrogatepass keeps lone surrogates as single code units.
    return text.encode("utf-16-le", "surrogatepass")


def sha256_hex(text: str) -> str:
    """SHA-256 lowercase hex digest of the UTF-8 encoding of text.

    Paired surrogates are joined and lone surrogates become U+FFFD before
    encoding, so any str can be hashed.
    """
    well_formed = _utf16(text).decode("utf-16-le", "replace")
    return hashlib.sha256(well_formed.encode("utf-8")).hexdigest()


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units."""
    return len(_utf16(text)) // 2


def redact(text: str) -> Redacted:
    """Redact a string to its digest and length. Never returns the input."""
    return Redacted(sha256=sha256_hex(text), length=utf16_length(text))


def redacted_fields(prefix: str, text: str, redact_enabled: bool) -> dict[str, str | int]:
    """Build the payload fields for a sensitive string.

    Returns ``{prefix}_sha256`` and ``{prefix}_length`` when redacting,
    otherwise the raw value under ``prefix`` and its length.
    """
    if redact_enabled:
        r = redact(text)
        return {f"{prefix}_sha256": r.sha256, f"{prefix}_length": r.length}
    return {prefix: text, f"{prefix}_length": utf16_length(text)}
