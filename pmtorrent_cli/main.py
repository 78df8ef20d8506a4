"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m pmtorrent_cli list <path>... [--json]
    python -m pmtorrent_cli piece <path> <index> [--out FILE]
    python -m pmtorrent_cli verify <piece.json> [--json]
    python -m pmtorrent_cli config --init | --show

Environment Variables:
    PMTORRENT_LOG_LEVEL         Log level (default: INFO)
    PMTORRENT_LOG_FILE          Also log to this file
    PMTORRENT_OUTPUT_FORMAT     human or json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from pmtorrent import __version__
from pmtorrent.config import get_default_config_template, load_config
from pmtorrent.schemas.errors import PmTorrentException
from pmtorrent_cli.commands import list_files, piece, verify
from pmtorrent_cli.commands import EXIT_RUNTIME_ERROR, EXIT_SUCCESS


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="pmtorrent",
        description="Split files into chunks, serve pieces with Merkle proofs, verify pieces.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./pmtorrent.json or ~/.config/pmtorrent/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- list command ---
    list_parser = subparsers.add_parser(
        "list",
        help="List root hashes and piece counts of files",
        description="Load files into a repository and list each root hash with its piece count.",
    )
    list_parser.add_argument(
        "paths",
        type=str,
        nargs="*",
        help="Files to load (default: default_paths from config)",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Output machine-readable JSON",
    )
    list_parser.set_defaults(func=list_files.list_cmd)

    # --- piece command ---
    piece_parser = subparsers.add_parser(
        "piece",
        help="Extract one piece of a file with its proof",
        description="Serialize chunk INDEX of a file together with its Merkle proof.",
    )
    piece_parser.add_argument("path", type=str, help="File to load")
    piece_parser.add_argument("index", type=int, help="Zero-based piece index")
    piece_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the piece document to this path instead of stdout",
    )
    piece_parser.set_defaults(func=piece.piece_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a serialized piece against its root hash",
        description="Recompute the root from a piece document and compare it with the claimed root.",
    )
    verify_parser.add_argument(
        "piece_path",
        type=str,
        help="Path to a piece document written by 'piece --out'",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Trusted root hash (default: the hash recorded in the document)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="pmtorrent.json",
        help="Path for config file (default: pmtorrent.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (PMTORRENT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: pmtorrent config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point. Returns a process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: Failed to load configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(args.log_level or config.log_level, config.log_file)
    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except PmTorrentException as e:
        logger.error("%s: %s", e.code, e.message)
        return EXIT_RUNTIME_ERROR
    except OSError as e:
        logger.error("I/O error: %s", e)
        return EXIT_RUNTIME_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
