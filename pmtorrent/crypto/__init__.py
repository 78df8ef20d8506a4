"""
Core cryptographic utilities.

Provides the digest capability the Merkle engine is parameterized by,
the production SHA-256 hash kind and a readable test-only emoji kind.
"""
from .hashing import (
    SHA256_BYTES,
    FILLER_HASH,
    Hasher,
    Sha256Hash,
    Sha256Hasher,
    as_bytes,
    to_hex,
    from_hex,
    hash_concat,
)
from .emoji import EMOJI_HASH_BYTES, EmojiHash, EmojiHasher

__all__ = [
    "SHA256_BYTES",
    "FILLER_HASH",
    "Hasher",
    "Sha256Hash",
    "Sha256Hasher",
    "as_bytes",
    "to_hex",
    "from_hex",
    "hash_concat",
    "EMOJI_HASH_BYTES",
    "EmojiHash",
    "EmojiHasher",
]
