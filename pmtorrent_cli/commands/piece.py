"""
CLI Piece Command

Extract one piece of a file with its Merkle proof and serialize it as a
self-describing piece document.

Usage:
    pmtorrent piece a.bin 3 [--out piece.json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from pathlib import Path

from pmtorrent.schemas.transport import PieceDocument
from pmtorrent_cli.commands import EXIT_SUCCESS
from pmtorrent_cli.commands.list_files import load_repository


logger = logging.getLogger(__name__)


def build_document(path: str, index: int) -> PieceDocument:
    """
    Load path and serialize piece index with its proof.

    Raises:
        DoesntExistError: If index is not a piece of the file
        RepoFileError: If the file cannot be chunked
    """
    repo = load_repository([path])
    [entry] = repo.list()
    piece = repo.get_piece(entry.hash, index)
    return PieceDocument.from_piece(piece, hash_hex=entry.hash, pieces=entry.pieces)


def piece_cmd(args: Namespace) -> int:
    """Handle piece command."""
    document = build_document(args.path, args.index)
    payload = document.model_dump_json(indent=2)

    if args.out:
        Path(args.out).write_text(payload + "\n")
        logger.info(f"Wrote piece {document.index} of {document.hash} to {args.out}")
    else:
        print(payload)

    return EXIT_SUCCESS
