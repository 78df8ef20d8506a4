"""
pmtorrent

Chunked file distribution with Merkle proofs: split a file into fixed-size
chunks, build a Merkle tree over them, and serve any chunk together with
the proof that it belongs to a file known only by its root hash.

Usage:
    from pmtorrent import File, Repository, verify_chunk

    repo = Repository()
    key = repo.add(File(data))
    piece = repo.get_piece(key, 0)
    assert verify_chunk(repo.get(key).root(), piece.content, 0,
                        repo.get(key).size(), piece.proof)
"""

__version__ = "0.1.0"

from pmtorrent.crypto import FILLER_HASH, Sha256Hash, Sha256Hasher
from pmtorrent.files import CHUNK_BYTES, Chunk, File, root_from_partial, verify_chunk
from pmtorrent.merkle import LeafPolicy, MerkleTree
from pmtorrent.repo import Repository
from pmtorrent.schemas.transport import FileDescription, Piece

__all__ = [
    "FILLER_HASH",
    "Sha256Hash",
    "Sha256Hasher",
    "CHUNK_BYTES",
    "Chunk",
    "File",
    "root_from_partial",
    "verify_chunk",
    "LeafPolicy",
    "MerkleTree",
    "Repository",
    "FileDescription",
    "Piece",
]
