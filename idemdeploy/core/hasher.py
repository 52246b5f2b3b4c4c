"""Hashing and byte-normalisation helpers for content addressing.

The fingerprint of an artifact is the SHA-256 of its full initialization
payload (init code followed by constructor arguments). It depends only on
content, never on the artifact's name or registration order.
"""

from __future__ import annotations

import hashlib

SALT_SIZE = 32
ADDRESS_SIZE = 20

ZERO_SALT: bytes = bytes(SALT_SIZE)


def sha256_digest(data: bytes) -> bytes:
    """Return the raw 32-byte SHA-256 digest of *data*."""
    return hashlib.sha256(data).digest()


def full_payload(init_payload: bytes, constructor_args: bytes = b"") -> bytes:
    """Concatenate init code and encoded constructor arguments."""
    return bytes(init_payload) + bytes(constructor_args)


def compute_fingerprint(init_payload: bytes, constructor_args: bytes = b"") -> bytes:
    """SHA-256 of ``init_payload || constructor_args``."""
    return sha256_digest(full_payload(init_payload, constructor_args))


def to_hex(data: bytes) -> str:
    """Render bytes as ``0x``-prefixed lowercase hex."""
    return "0x" + bytes(data).hex()


def from_hex(value: str) -> bytes:
    """Parse hex text with an optional ``0x`` prefix.

    Raises ``ValueError`` on odd length or non-hex characters.
    """
    text = value.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    if len(text) % 2:
        raise ValueError(f"Hex string has odd length: {value!r}")
    return bytes.fromhex(text)


def normalize_salt(salt: bytes | str | int | None) -> bytes:
    """Coerce a caller-supplied salt into exactly 32 bytes.

    Accepts raw bytes, hex text, or a non-negative int. Shorter values are
    left-padded with zeros; ``None`` means the zero salt.
    """
    if salt is None:
        return ZERO_SALT
    if isinstance(salt, int):
        if salt < 0:
            raise ValueError("Salt must be non-negative")
        return salt.to_bytes(SALT_SIZE, "big")
    raw = from_hex(salt) if isinstance(salt, str) else bytes(salt)
    if len(raw) > SALT_SIZE:
        raise ValueError(f"Salt is {len(raw)} bytes, maximum is {SALT_SIZE}")
    return raw.rjust(SALT_SIZE, b"\x00")


def is_address(value: object) -> bool:
    """Whether *value* is ``0x`` followed by exactly 40 hex characters."""
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    body = value[2:]
    if len(body) != ADDRESS_SIZE * 2:
        return False
    try:
        bytes.fromhex(body)
    except ValueError:
        return False
    return True


def normalize_address(value: str) -> str:
    """Lowercase an address for comparison and storage."""
    return value.lower()
