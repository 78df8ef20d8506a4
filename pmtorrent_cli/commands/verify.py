"""
CLI Verify Command

Verify a piece document offline: recompute the root from the chunk and
its proof and compare it with the trusted root.

Usage:
    pmtorrent verify piece.json [--root HEX] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path

from pydantic import ValidationError

from pmtorrent.crypto.hashing import Sha256Hash
from pmtorrent.files import root_from_partial
from pmtorrent.schemas.errors import FileError
from pmtorrent.schemas.transport import PieceDocument
from pmtorrent_cli.commands import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of piece verification for CLI output."""
    piece_path: str = ""
    index: int = 0
    pieces: int = 0
    trusted_root: str = ""
    computed_root: str = ""
    ok: bool = False
    error: str = ""

    def to_dict(self) -> dict:
        d = asdict(self)
        if not d["error"]:
            del d["error"]
        return d


def verify_document(
    document: PieceDocument,
    trusted_root: Sha256Hash,
    piece_path: str = "",
) -> VerifySummary:
    """Recompute the root of a piece document and compare it with trusted_root."""
    summary = VerifySummary(
        piece_path=piece_path,
        index=document.index,
        pieces=document.pieces,
        trusted_root=trusted_root.hex(),
    )

    try:
        piece = document.to_piece()
        computed = root_from_partial(piece.content, piece.index, document.pieces, piece.proof)
    except FileError as e:
        summary.error = e.message
        return summary
    except ValueError as e:
        summary.error = str(e)
        return summary

    summary.computed_root = computed.hex()
    summary.ok = computed == trusted_root
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"piece: {summary.piece_path} [{summary.index}/{summary.pieces}]")
    print(f"trusted_root: {summary.trusted_root}")
    if summary.computed_root:
        print(f"computed_root: {summary.computed_root}")
    if summary.error:
        print(f"error: {summary.error}")
    print(f"ok: {str(summary.ok).lower()}")


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    piece_path = Path(args.piece_path)
    try:
        document = PieceDocument.model_validate_json(piece_path.read_text())
        trusted_root = Sha256Hash.from_hex(args.root) if args.root else document.root()
    except (ValidationError, ValueError) as e:
        logger.error(f"Invalid piece document {piece_path}: {e}")
        return EXIT_RUNTIME_ERROR

    logger.info(f"Verifying piece {document.index} against {trusted_root.hex()}")
    summary = verify_document(document, trusted_root, str(piece_path))

    if wants_json(args):
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
