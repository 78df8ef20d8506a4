"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the Merkle engine, files and the
repository. Defines a Pydantic model for structured error reporting and
Python exceptions for control flow.

Propagation:
    MerkleError  -> raised by tree construction and index lookups
    FileError    -> raised by File; wraps MerkleError as FileMerkleError
    RepoError    -> raised by Repository; "nothing found" causes are
                    collapsed into DoesntExistError
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Merkle engine
    LEAF_COUNT = "LEAF_COUNT"
    INVALID_IDX = "INVALID_IDX"
    PROOF_INVALID = "PROOF_INVALID"

    # Files & chunking
    FILE_ERROR = "FILE_ERROR"
    FILE_EMPTY = "FILE_EMPTY"
    CHUNK_NOT_FOUND = "CHUNK_NOT_FOUND"
    CHUNK_SIZE = "CHUNK_SIZE"
    FILE_MERKLE_ERROR = "FILE_MERKLE_ERROR"

    # Repository
    DOESNT_EXIST = "DOESNT_EXIST"
    REPO_FILE_ERROR = "REPO_FILE_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class PmTorrentError(BaseModel):
    """
    Error model for structured error reporting.

    Used by outer layers (CLI, transports) to report a failure without
    re-raising it.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.DOESNT_EXIST],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PmTorrentException(Exception):
    """
    Base exception for all pmtorrent errors.

    Carries a stable code and structured details, and converts to a
    PmTorrentError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "PMTORRENT_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> PmTorrentError:
        """Convert this exception to a PmTorrentError model."""
        return PmTorrentError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# -----------------------------------------------------------------------------
# Merkle engine
# -----------------------------------------------------------------------------

class MerkleError(PmTorrentException):
    """Base class for Merkle tree engine failures."""


class LeafCountError(MerkleError):
    """A tree level does not hold a power-of-two number of nodes."""

    def __init__(
        self,
        message: str,
        count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if count is not None:
            full_details["count"] = count
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_COUNT,
            details=full_details,
        )


class InvalidIdxError(MerkleError):
    """A node index lies outside the tree (or has no sibling/parent)."""

    def __init__(
        self,
        message: str,
        idx: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if idx is not None:
            full_details["idx"] = idx
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_IDX,
            details=full_details,
        )


# -----------------------------------------------------------------------------
# Files
# -----------------------------------------------------------------------------

class FileError(PmTorrentException):
    """Base class for chunk-level file failures."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.FILE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class EmptyFileError(FileError):
    """Chunking produced no data."""

    def __init__(self, message: str = "Cannot build a file from empty input") -> None:
        super().__init__(message=message, code=ErrorCodes.FILE_EMPTY)


class ChunkIndexError(FileError):
    """The requested chunk index does not exist in the file."""

    def __init__(self, idx: int, size: int) -> None:
        super().__init__(
            message=f"Chunk index {idx} out of range for {size} chunks",
            code=ErrorCodes.CHUNK_NOT_FOUND,
            details={"idx": idx, "size": size},
        )


class FileMerkleError(FileError):
    """A Merkle engine failure raised while operating on a file."""

    def __init__(self, merkle: MerkleError) -> None:
        super().__init__(
            message=f"Merkle tree error: {merkle.message}",
            code=ErrorCodes.FILE_MERKLE_ERROR,
            details={"merkle_code": merkle.code, **merkle.details},
        )
        self.merkle = merkle


# -----------------------------------------------------------------------------
# Repository
# -----------------------------------------------------------------------------

class RepoError(PmTorrentException):
    """Base class for repository failures."""

    @staticmethod
    def from_file_error(error: FileError) -> "RepoError":
        """
        Map a FileError onto the repository taxonomy.

        A missing chunk or an invalid tree index means there is nothing to
        return, so both become DoesntExistError. Everything else is an
        internal inconsistency and is wrapped as RepoFileError.
        """
        if isinstance(error, ChunkIndexError):
            return DoesntExistError(details=error.details)
        if isinstance(error, FileMerkleError) and isinstance(error.merkle, InvalidIdxError):
            return DoesntExistError(details=error.details)
        return RepoFileError(error)


class DoesntExistError(RepoError):
    """The requested file or piece does not exist."""

    def __init__(
        self,
        message: str = "Requested data does not exist",
        hash_hex: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if hash_hex is not None:
            full_details["hash"] = hash_hex
        super().__init__(
            message=message,
            code=ErrorCodes.DOESNT_EXIST,
            details=full_details,
        )


class RepoFileError(RepoError):
    """A file-level failure surfaced through the repository."""

    def __init__(self, file_error: FileError) -> None:
        super().__init__(
            message=f"File error: {file_error.message}",
            code=ErrorCodes.REPO_FILE_ERROR,
            details={"file_code": file_error.code, **file_error.details},
        )
        self.file_error = file_error


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
