"""
CLI List Command

Load files into a repository and list the catalog.

Usage:
    pmtorrent list a.bin b.bin [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from pmtorrent.repo import Repository
from pmtorrent.schemas.transport import FileDescription
from pmtorrent_cli.commands import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, wants_json


logger = logging.getLogger(__name__)


def load_repository(paths: list[str]) -> Repository:
    """Build a repository holding every path, fully populated before use."""
    repo = Repository()
    for path in paths:
        repo.add_path(path)
    return repo


def print_catalog_human(entries: list[FileDescription]) -> None:
    if not entries:
        print("No files")
        return
    for entry in sorted(entries, key=lambda e: e.hash):
        print(f"{entry.hash}  pieces={entry.pieces}")


def list_cmd(args: Namespace) -> int:
    """Handle list command."""
    paths = args.paths or args.runtime_config.default_paths
    if not paths:
        logger.error("No files given and no default_paths configured")
        return EXIT_RUNTIME_ERROR

    repo = load_repository(paths)
    entries = repo.list()

    if wants_json(args):
        print(json.dumps([e.model_dump() for e in entries], indent=2))
    else:
        print_catalog_human(entries)

    return EXIT_SUCCESS
