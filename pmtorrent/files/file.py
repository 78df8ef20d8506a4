"""
Content-Addressed File
Binds a chunk sequence to its Merkle tree. The tree root is the file's
content address.

Leaf Rules:
1. Leaf hash: sha256(chunk bytes right-padded with zeros to CHUNK_BYTES)
   The stored chunk keeps its true, unpadded length.
2. Leaf count is padded to the next power of two with FILLER_HASH.
3. Chunk storage order equals leaf order: chunks[i].leaf_idx == i.
4. Every chunk but the last holds exactly CHUNK_BYTES bytes; none is empty.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Sequence

from pmtorrent.crypto.hashing import Sha256Hash, Sha256Hasher
from pmtorrent.files.chunk import (
    CHUNK_BYTES,
    AsyncByteReader,
    Chunk,
    pad_data,
    read_chunks,
    read_chunks_async,
    to_chunks,
)
from pmtorrent.merkle import merkle_proofs
from pmtorrent.merkle.merkle_tree import LeafPolicy, MerkleTree
from pmtorrent.schemas.errors import (
    ChunkIndexError,
    EmptyFileError,
    ErrorCodes,
    FileError,
    FileMerkleError,
    MerkleError,
)


logger = logging.getLogger(__name__)

_HASHER = Sha256Hasher()


def chunk_leaf_hash(chunk: Chunk | bytes) -> Sha256Hash:
    """Leaf hash of a chunk: SHA-256 of its zero-padded bytes."""
    data = chunk.data if isinstance(chunk, Chunk) else bytes(chunk)
    return _HASHER.digest(pad_data(data))


def build_chunk_tree(chunks: Sequence[Chunk]) -> MerkleTree[Sha256Hash]:
    """
    Build the padded SHA-256 tree over a chunk sequence.

    Raises:
        FileMerkleError: If tree construction fails
    """
    try:
        return MerkleTree.build(
            _HASHER,
            chunks,
            policy=LeafPolicy.PADDED,
            leaf_hash=chunk_leaf_hash,
        )
    except MerkleError as e:
        raise FileMerkleError(e) from e


class File:
    """
    File content held as chunks together with its Merkle tree.

    A File is immutable once built. Construct it from a buffer, a chunk
    sequence, a blocking reader, an async reader or a path.

    Example:
        >>> f = File(bytes(6145))
        >>> f.size()
        7
        >>> chunk, proof = f.get_chunk(6)
        >>> len(chunk), len(proof)
        (1, 3)
    """

    def __init__(self, data: bytes) -> None:
        self._init(to_chunks(data))

    def _init(self, chunks: list[Chunk]) -> None:
        if not chunks:
            raise EmptyFileError()
        last = len(chunks) - 1
        for i, chunk in enumerate(chunks):
            if chunk.leaf_idx != i:
                raise ValueError(
                    f"Chunk at position {i} has leaf_idx {chunk.leaf_idx}"
                )
            if chunk.is_empty():
                raise EmptyFileError(f"Chunk {i} holds no data")
            # Only the last chunk may be short.
            if i < last and len(chunk) != CHUNK_BYTES:
                raise FileError(
                    f"Chunk {i} holds {len(chunk)} bytes, expected {CHUNK_BYTES}",
                    code=ErrorCodes.CHUNK_SIZE,
                    details={"idx": i, "size": len(chunk)},
                )

        self._chunks: tuple[Chunk, ...] = tuple(chunks)
        self._tree = build_chunk_tree(self._chunks)
        logger.debug("Built file %s with %d chunks", self._tree.root.hex(), len(chunks))

    @classmethod
    def from_chunks(cls, chunks: Sequence[Chunk]) -> "File":
        """Build a File from chunks already in leaf order."""
        file = cls.__new__(cls)
        file._init(list(chunks))
        return file

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> "File":
        """Build a File by reading a binary stream chunk by chunk."""
        return cls.from_chunks(list(read_chunks(reader)))

    @classmethod
    async def from_async_reader(cls, reader: AsyncByteReader) -> "File":
        """Build a File from an asynchronous byte source."""
        chunks = [chunk async for chunk in read_chunks_async(reader)]
        return cls.from_chunks(chunks)

    @classmethod
    def from_path(cls, path: str | Path) -> "File":
        """Build a File from the contents of a file on disk."""
        with open(path, "rb") as f:
            return cls.from_reader(f)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._chunks

    @property
    def tree(self) -> MerkleTree[Sha256Hash]:
        return self._tree

    def root(self) -> Sha256Hash:
        """The content address: last element of the tree."""
        return self._tree.root

    def trusted_root(self) -> Sha256Hash:
        return self._tree.root

    def size(self) -> int:
        """Number of real (non-filler) chunks."""
        return len(self._chunks)

    chunk_count = size

    def get_chunk(self, idx: int) -> tuple[Chunk, list[Sha256Hash]]:
        """
        Return chunk idx and its proof.

        Raises:
            ChunkIndexError: If idx is not a real chunk index
            FileMerkleError: If the proof cannot be extracted
        """
        if idx < 0 or idx >= len(self._chunks):
            raise ChunkIndexError(idx, len(self._chunks))

        chunk = self._chunks[idx]
        try:
            proof = self._tree.get_proof(chunk.leaf_idx)
        except MerkleError as e:
            raise FileMerkleError(e) from e
        return chunk, proof

    def verify(self) -> bool:
        """Rebuild the tree from the stored chunks and compare."""
        return build_chunk_tree(self._chunks) == self._tree

    def __repr__(self) -> str:
        return f"File(root={self.root().hex()}, chunks={self.size()})"


def root_from_partial(
    chunk: Chunk | bytes,
    leaf_idx: int,
    leaf_count: int,
    proof: Sequence[Sha256Hash],
) -> Sha256Hash:
    """
    Recompute a file root from one chunk and its proof.

    Short chunks are zero-padded exactly as during construction.
    leaf_count may be the real chunk count or the padded leaf count.

    Raises:
        FileMerkleError: If the index or proof length is invalid
    """
    try:
        return merkle_proofs.root_from_partial(
            _HASHER, chunk, leaf_idx, leaf_count, proof, leaf_hash=chunk_leaf_hash,
        )
    except MerkleError as e:
        raise FileMerkleError(e) from e


def verify_chunk(
    trusted_root: Sha256Hash,
    chunk: Chunk | bytes,
    leaf_idx: int,
    leaf_count: int,
    proof: Sequence[Sha256Hash],
) -> bool:
    """Check a chunk and its proof against a trusted file root."""
    return merkle_proofs.verify_partial(
        _HASHER, trusted_root, chunk, leaf_idx, leaf_count, proof,
        leaf_hash=chunk_leaf_hash,
    )


__all__ = [
    "File",
    "build_chunk_tree",
    "chunk_leaf_hash",
    "root_from_partial",
    "verify_chunk",
]
