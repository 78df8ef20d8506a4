"""
Hashing Utilities
Digest capability and the production SHA-256 hash kind.

This module provides:
- Hasher: the "can digest bytes" capability the Merkle engine is generic over
- Sha256Hash: fixed-width 32-byte digest value
- Sha256Hasher: production SHA-256 implementation of Hasher
- FILLER_HASH: all-zero hash reserved for padding leaves
- as_bytes / to_hex / from_hex helpers

Hashing Rules:
1. Leaf hashing: digest(leaf_bytes)
2. Parent hashing: digest(left + right), plain concatenation with no
   domain-separation prefix between leaf and inner levels
3. FILLER_HASH never comes out of digest() for real input (accepted
   theoretical collision risk)
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar


SHA256_BYTES = 32

H = TypeVar("H")
H_co = TypeVar("H_co", covariant=True)


class Hasher(Protocol[H_co]):
    """
    A one-way hash function over raw bytes.

    Implementations must be total and deterministic: equal inputs give
    equal outputs. filler() returns the hash kind's padding constant.
    """

    def digest(self, data: bytes) -> H_co:
        ...

    def filler(self) -> H_co:
        ...


def as_bytes(value: Any) -> bytes:
    """
    Convert a leaf or hash value to the bytes that get digested.

    Args:
        value: bytes-like, str (UTF-8 encoded) or any object implementing
               __bytes__ (Chunk, Sha256Hash, EmojiHash)

    Returns:
        Raw bytes

    Raises:
        TypeError: If the value has no byte representation
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    if hasattr(value, "__bytes__"):
        return bytes(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to bytes")


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string (no prefix).

    Example:
        >>> to_hex(bytes.fromhex("DEADBEEF"))
        'deadbeef'
    """
    return data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes.

    Raises:
        ValueError: If the string has odd length or invalid characters
    """
    if len(hex_string) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_string)}"
        )
    try:
        return bytes.fromhex(hex_string)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


@dataclass(frozen=True)
class Sha256Hash:
    """
    A 32-byte SHA-256 digest.

    Equality is byte-exact. hex() gives the lowercase form used as a
    repository catalog key.
    """
    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != SHA256_BYTES:
            raise ValueError(
                f"Sha256Hash must be {SHA256_BYTES} bytes, got {len(self.value)}"
            )

    def __bytes__(self) -> bytes:
        return self.value

    def hex(self) -> str:
        return to_hex(self.value)

    @classmethod
    def from_hex(cls, hex_string: str) -> "Sha256Hash":
        return cls(from_hex(hex_string))

    def __repr__(self) -> str:
        return f"Sha256Hash({self.hex()})"


FILLER_HASH: Sha256Hash = Sha256Hash(bytes(SHA256_BYTES))


class Sha256Hasher:
    """Hasher that digests data with SHA-256."""

    def digest(self, data: bytes) -> Sha256Hash:
        """
        Compute the SHA-256 digest of raw bytes.

        Example:
            >>> Sha256Hasher().digest(b"hello").hex()
            '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
        """
        return Sha256Hash(hashlib.sha256(data).digest())

    def filler(self) -> Sha256Hash:
        return FILLER_HASH


def hash_concat(hasher: Hasher[H], left: Any, right: Any) -> H:
    """
    Hash the concatenation of two node hashes.

    This is the parent rule for every inner level:
    parent = digest(left + right)
    """
    return hasher.digest(as_bytes(left) + as_bytes(right))


__all__ = [
    "SHA256_BYTES",
    "Hasher",
    "Sha256Hash",
    "Sha256Hasher",
    "FILLER_HASH",
    "as_bytes",
    "to_hex",
    "from_hex",
    "hash_concat",
]
