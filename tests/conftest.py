"""
Pytest configuration and shared fixtures for pmtorrent tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from pmtorrent.crypto import EmojiHasher, Sha256Hasher  # noqa: E402
from pmtorrent.files import CHUNK_BYTES  # noqa: E402


def make_content(size: int, seed: int = 7) -> bytes:
    """Deterministic, non-uniform content of the given size."""
    return bytes((i * 31 + seed) % 251 for i in range(size))


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def sha256_hasher():
    """Provide the production SHA-256 hasher."""
    return Sha256Hasher()


@pytest.fixture
def emoji_hasher():
    """Provide the readable test-only emoji hasher."""
    return EmojiHasher()


@pytest.fixture
def content():
    """Factory for deterministic content: content(size, seed=7)."""
    return make_content


@pytest.fixture
def seven_chunk_data():
    """6 full chunks followed by a 1-byte chunk."""
    return make_content(6 * CHUNK_BYTES + 1)


@pytest.fixture
def seven_chunk_file(tmp_path, seven_chunk_data):
    """The 7-chunk content written to disk."""
    path = tmp_path / "seven.bin"
    path.write_bytes(seven_chunk_data)
    return path

