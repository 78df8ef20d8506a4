"""
pmtorrent CLI

Command-line interface around the file repository. Local process wiring
only: it loads files, prints catalogs and pieces, and verifies pieces.

Usage:
    python -m pmtorrent_cli list <path>...
    python -m pmtorrent_cli piece <path> <index> --out piece.json
    python -m pmtorrent_cli verify piece.json
"""
