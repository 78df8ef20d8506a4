"""
Emoji hash kind.

A deliberately weak 4-byte hash whose values are printable emoji. It is
not collision resistant and exists only so the Merkle engine can be
tested with hashes a human can read.
"""
from __future__ import annotations

from dataclasses import dataclass


EMOJI_HASH_BYTES = 4

# 👂 starts a run of 182 sequential emoji
_EMOJI_BASE = 0x1F442
_PRIME = 181


@dataclass(frozen=True)
class EmojiHash:
    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != EMOJI_HASH_BYTES:
            raise ValueError(
                f"EmojiHash must be {EMOJI_HASH_BYTES} bytes, got {len(self.value)}"
            )

    def __bytes__(self) -> bytes:
        return self.value

    def emoji(self) -> str:
        return chr(int.from_bytes(self.value, "big"))

    def hex(self) -> str:
        return self.value.hex()

    def __repr__(self) -> str:
        if self.value == bytes(EMOJI_HASH_BYTES):
            return "EmojiHash(<filler>)"
        return f"EmojiHash({self.emoji()})"


class EmojiHasher:
    """Hasher producing EmojiHash values."""

    def digest(self, data: bytes) -> EmojiHash:
        acc = 0
        for v in data:
            acc = (acc % _PRIME + v) & 0xFF
        acc %= _PRIME
        return EmojiHash((_EMOJI_BASE + acc).to_bytes(EMOJI_HASH_BYTES, "big"))

    def filler(self) -> EmojiHash:
        return EmojiHash(bytes(EMOJI_HASH_BYTES))


__all__ = ["EMOJI_HASH_BYTES", "EmojiHash", "EmojiHasher"]
