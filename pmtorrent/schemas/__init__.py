"""
Schemas
File: __init__.py

Purpose: Export the error taxonomy. Transport shapes live in
pmtorrent.schemas.transport and are imported from there, since they
depend on the files package.
"""

from .errors import (
    ErrorCodes,
    PmTorrentError,
    PmTorrentException,
    MerkleError,
    LeafCountError,
    InvalidIdxError,
    FileError,
    EmptyFileError,
    ChunkIndexError,
    FileMerkleError,
    RepoError,
    DoesntExistError,
    RepoFileError,
)

__all__ = [
    "ErrorCodes",
    "PmTorrentError",
    "PmTorrentException",
    "MerkleError",
    "LeafCountError",
    "InvalidIdxError",
    "FileError",
    "EmptyFileError",
    "ChunkIndexError",
    "FileMerkleError",
    "RepoError",
    "DoesntExistError",
    "RepoFileError",
]
