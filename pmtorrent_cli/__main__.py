"""
Module execution entry point.

Allows running with: python -m pmtorrent_cli
"""

import sys
from pmtorrent_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
