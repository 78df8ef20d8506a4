"""
Schemas - Transport Shapes
File: transport.py

Purpose: The shapes the repository hands to an outer transport layer.

Wire Rules:
1. Hashes serialize as lowercase hex of the raw digest bytes
2. Chunk content serializes as base64 of the raw (unpadded) bytes
"""

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from pmtorrent.crypto.hashing import SHA256_BYTES, Sha256Hash
from pmtorrent.files.chunk import Chunk


class FileDescription(BaseModel):
    """One catalog entry: a file root and its real chunk count."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    hash: str = Field(
        ...,
        description="Lowercase hex root hash of the file",
        min_length=2 * SHA256_BYTES,
        max_length=2 * SHA256_BYTES,
    )
    pieces: int = Field(
        ...,
        description="Number of real chunks in the file",
        ge=1,
    )


class Piece(BaseModel):
    """
    One chunk plus its proof.

    The proof is ordered from the leaf level toward the root, root
    excluded.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    content: Chunk = Field(..., description="The requested chunk")
    proof: list[Sha256Hash] = Field(
        default_factory=list,
        description="Sibling hashes from leaf toward root",
    )

    @field_serializer("content")
    def _serialize_content(self, content: Chunk) -> str:
        return base64.b64encode(content.data).decode("ascii")

    @field_serializer("proof")
    def _serialize_proof(self, proof: list[Sha256Hash]) -> list[str]:
        return [h.hex() for h in proof]

    @property
    def index(self) -> int:
        return self.content.leaf_idx


class PieceDocument(BaseModel):
    """
    A self-describing serialized piece.

    Carries the file root, the piece index and the real chunk count next
    to the wire form of the Piece, which is everything a verifier needs.
    """

    model_config = ConfigDict(extra="forbid")

    hash: str = Field(..., description="Lowercase hex root hash of the file")
    index: int = Field(..., description="Chunk index within the file", ge=0)
    pieces: int = Field(..., description="Number of real chunks in the file", ge=1)
    content: str = Field(..., description="Base64 chunk bytes")
    proof: list[str] = Field(default_factory=list, description="Hex sibling hashes")

    @field_validator("hash")
    @classmethod
    def _check_hash(cls, v: str) -> str:
        Sha256Hash.from_hex(v)
        return v.lower()

    @field_validator("proof")
    @classmethod
    def _check_proof(cls, v: list[str]) -> list[str]:
        for h in v:
            Sha256Hash.from_hex(h)
        return [h.lower() for h in v]

    @field_validator("content")
    @classmethod
    def _check_content(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except binascii.Error as e:
            raise ValueError(f"content is not valid base64: {e}") from e
        return v

    @classmethod
    def from_piece(cls, piece: Piece, hash_hex: str, pieces: int) -> "PieceDocument":
        wire: dict[str, Any] = piece.model_dump()
        return cls(hash=hash_hex, index=piece.index, pieces=pieces, **wire)

    def root(self) -> Sha256Hash:
        return Sha256Hash.from_hex(self.hash)

    def to_piece(self) -> Piece:
        return Piece(
            content=Chunk(data=base64.b64decode(self.content), leaf_idx=self.index),
            proof=[Sha256Hash.from_hex(h) for h in self.proof],
        )


__all__ = ["FileDescription", "Piece", "PieceDocument"]
