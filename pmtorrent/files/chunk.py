"""
Chunking
Split byte input into fixed-size, sequentially indexed chunks.

Every chunker yields the same boundaries for identical content: all
chunks hold CHUNK_BYTES bytes except the last, which holds the remainder
(1..CHUNK_BYTES bytes). Readers that return short reads are drained until
a chunk is full or the source is exhausted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, BinaryIO, Iterator, Protocol


CHUNK_BYTES = 1024


class AsyncByteReader(Protocol):
    """Anything with an awaitable read(n), e.g. asyncio.StreamReader."""

    async def read(self, n: int = -1) -> bytes:
        ...


@dataclass(frozen=True)
class Chunk:
    """
    A piece of file content and its position in the file.

    Attributes:
        data: The chunk bytes, unpadded
        leaf_idx: Zero-based position of the chunk in the file
    """
    data: bytes
    leaf_idx: int

    def __post_init__(self) -> None:
        if self.leaf_idx < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.leaf_idx}")
        if len(self.data) > CHUNK_BYTES:
            raise ValueError(
                f"Chunk holds at most {CHUNK_BYTES} bytes, got {len(self.data)}"
            )

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return len(self.data) == 0

    def padded(self) -> bytes:
        """The chunk bytes right-padded with zeros to CHUNK_BYTES."""
        return pad_data(self.data)

    def __repr__(self) -> str:
        return f"Chunk(leaf_idx={self.leaf_idx}, len={len(self.data)})"


def pad_data(data: bytes) -> bytes:
    """Right-pad data with zero bytes up to CHUNK_BYTES."""
    if len(data) >= CHUNK_BYTES:
        return data
    return data + bytes(CHUNK_BYTES - len(data))


def to_chunks(data: bytes) -> list[Chunk]:
    """
    Split an in-memory buffer into chunks.

    Example:
        >>> chunks = to_chunks(bytes(6145))
        >>> len(chunks), len(chunks[-1])
        (7, 1)
    """
    view = memoryview(data)
    return [
        Chunk(data=bytes(view[offset:offset + CHUNK_BYTES]), leaf_idx=i)
        for i, offset in enumerate(range(0, len(data), CHUNK_BYTES))
    ]


def _read_full(reader: BinaryIO) -> bytes:
    buf = bytearray()
    while len(buf) < CHUNK_BYTES:
        data = reader.read(CHUNK_BYTES - len(buf))
        if not data:
            break
        buf.extend(data)
    return bytes(buf)


def read_chunks(reader: BinaryIO) -> Iterator[Chunk]:
    """Yield chunks from a blocking binary reader until EOF."""
    idx = 0
    while True:
        data = _read_full(reader)
        if not data:
            return
        yield Chunk(data=data, leaf_idx=idx)
        idx += 1


async def _read_full_async(reader: AsyncByteReader) -> bytes:
    buf = bytearray()
    while len(buf) < CHUNK_BYTES:
        data = await reader.read(CHUNK_BYTES - len(buf))
        if not data:
            break
        buf.extend(data)
    return bytes(buf)


async def read_chunks_async(reader: AsyncByteReader) -> AsyncIterator[Chunk]:
    """Yield chunks from an asynchronous reader until EOF."""
    idx = 0
    while True:
        data = await _read_full_async(reader)
        if not data:
            return
        yield Chunk(data=data, leaf_idx=idx)
        idx += 1


__all__ = [
    "CHUNK_BYTES",
    "AsyncByteReader",
    "Chunk",
    "pad_data",
    "to_chunks",
    "read_chunks",
    "read_chunks_async",
]
