"""
Files and chunking.

Splits content into CHUNK_BYTES chunks and binds them to a padded
SHA-256 Merkle tree whose root addresses the file.
"""
from .chunk import (
    CHUNK_BYTES,
    AsyncByteReader,
    Chunk,
    pad_data,
    to_chunks,
    read_chunks,
    read_chunks_async,
)
from .file import (
    File,
    build_chunk_tree,
    chunk_leaf_hash,
    root_from_partial,
    verify_chunk,
)

__all__ = [
    "CHUNK_BYTES",
    "AsyncByteReader",
    "Chunk",
    "pad_data",
    "to_chunks",
    "read_chunks",
    "read_chunks_async",
    "File",
    "build_chunk_tree",
    "chunk_leaf_hash",
    "root_from_partial",
    "verify_chunk",
]
