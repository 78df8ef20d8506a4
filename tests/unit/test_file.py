"""
File Unit Tests
Tests for pmtorrent/files/file.py

Tests:
1. Construction from buffer, chunks, reader, async reader and path agree
2. Leaf hashing pads short chunks, root and size accessors
3. get_chunk proofs verify; out-of-range indices fail
4. root_from_partial / verify_chunk accept real or padded leaf count
5. Empty input is rejected
"""
import asyncio
import hashlib
import io

import pytest

from pmtorrent.crypto import FILLER_HASH, Sha256Hash
from pmtorrent.files import (
    CHUNK_BYTES,
    Chunk,
    File,
    chunk_leaf_hash,
    root_from_partial,
    to_chunks,
    verify_chunk,
)
from pmtorrent.schemas.errors import (
    ChunkIndexError,
    EmptyFileError,
    ErrorCodes,
    FileError,
    FileMerkleError,
)


class AsyncBytes:
    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)

    async def read(self, n: int = -1) -> bytes:
        return self._buf.read(n)


class TestConstruction:
    """All construction paths give the same File."""

    def test_all_sources_agree(self, seven_chunk_data, seven_chunk_file):
        expected = File(seven_chunk_data).root()

        assert File.from_chunks(to_chunks(seven_chunk_data)).root() == expected
        assert File.from_reader(io.BytesIO(seven_chunk_data)).root() == expected
        assert File.from_path(seven_chunk_file).root() == expected
        assert asyncio.run(File.from_async_reader(AsyncBytes(seven_chunk_data))).root() == expected

    def test_empty_input_rejected(self, tmp_path):
        with pytest.raises(EmptyFileError):
            File(b"")
        with pytest.raises(EmptyFileError):
            File.from_reader(io.BytesIO(b""))

        empty = tmp_path / "empty.bin"
        empty.write_bytes(b"")
        with pytest.raises(EmptyFileError):
            File.from_path(empty)

    def test_empty_is_file_error(self):
        with pytest.raises(FileError):
            File(b"")

    def test_out_of_order_chunks_rejected(self):
        chunks = [Chunk(data=b"a", leaf_idx=1), Chunk(data=b"b", leaf_idx=0)]

        with pytest.raises(ValueError, match="leaf_idx"):
            File.from_chunks(chunks)

    def test_empty_chunk_rejected(self):
        """An empty chunk would share a root with 1024 zero bytes."""
        with pytest.raises(EmptyFileError):
            File.from_chunks([Chunk(data=b"", leaf_idx=0)])

    def test_empty_last_chunk_rejected(self, content):
        chunks = [Chunk(data=content(CHUNK_BYTES), leaf_idx=0), Chunk(data=b"", leaf_idx=1)]

        with pytest.raises(EmptyFileError):
            File.from_chunks(chunks)

    def test_short_inner_chunk_rejected(self):
        """The same bytes split at other boundaries must not get another root."""
        chunks = [Chunk(data=b"aaaaa", leaf_idx=0), Chunk(data=b"b", leaf_idx=1)]

        with pytest.raises(FileError) as exc_info:
            File.from_chunks(chunks)

        assert exc_info.value.code == ErrorCodes.CHUNK_SIZE
        assert exc_info.value.details == {"idx": 0, "size": 5}

    def test_short_last_chunk_accepted(self, content):
        data = content(CHUNK_BYTES + 5)
        chunks = [Chunk(data=data[:CHUNK_BYTES], leaf_idx=0), Chunk(data=data[CHUNK_BYTES:], leaf_idx=1)]

        assert File.from_chunks(chunks).root() == File(data).root()

    def test_missing_path_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            File.from_path(tmp_path / "missing.bin")


class TestLeafHashing:
    """Leaf hash is SHA-256 of the zero-padded chunk."""

    def test_short_chunk_padded(self):
        expected = hashlib.sha256(b"abc" + bytes(CHUNK_BYTES - 3)).digest()

        assert chunk_leaf_hash(Chunk(data=b"abc", leaf_idx=0)).value == expected
        assert chunk_leaf_hash(b"abc").value == expected

    def test_single_byte_file_root(self):
        """A one-chunk file's root is its leaf hash."""
        f = File(b"\x01")

        assert f.size() == 1
        assert f.root().value == hashlib.sha256(b"\x01" + bytes(CHUNK_BYTES - 1)).digest()

    def test_trailing_zeros_collide_with_padding(self):
        """Padding is not length-prefixed, so b"a" and b"a\\x00" share a root."""
        assert File(b"a").root() == File(b"a\x00").root()


class TestLayout:
    """Tree shape of 6- and 7-chunk files."""

    def test_six_identical_chunks(self):
        f = File(b"\x2a" * (6 * CHUNK_BYTES))

        assert f.size() == 6
        assert len(f.tree) == 15
        assert f.tree[6] == f.tree[7] == FILLER_HASH
        assert f.tree[0] == f.tree[5]

    @pytest.mark.parametrize("chunks", [1, 2, 3, 5, 9, 17])
    def test_tree_length_and_padding(self, content, chunks):
        f = File(content(chunks * CHUNK_BYTES - 3))
        leaves = f.tree.leaf_count()

        assert len(f.tree) == 2 * leaves - 1
        assert all(f.tree[i] == FILLER_HASH for i in range(chunks, leaves))

    def test_seven_chunks(self, seven_chunk_data):
        f = File(seven_chunk_data)

        assert f.size() == 7
        assert f.chunk_count() == 7
        assert len(f.tree) == 15
        assert f.tree[7] == FILLER_HASH
        assert f.root() == f.tree[14] == f.trusted_root()

    def test_chunks_keep_true_length(self, seven_chunk_data):
        f = File(seven_chunk_data)

        assert len(f.chunks[-1]) == 1
        assert f.chunks[-1].leaf_idx == 6

    def test_verify(self, seven_chunk_data):
        assert File(seven_chunk_data).verify()

    def test_repr(self):
        assert "chunks=1" in repr(File(b"x"))


class TestGetChunk:
    """Chunk lookup and proof extraction."""

    def test_every_chunk_verifies(self, seven_chunk_data):
        f = File(seven_chunk_data)

        for idx in range(f.size()):
            chunk, proof = f.get_chunk(idx)
            assert chunk.leaf_idx == idx
            assert len(proof) == 3
            assert root_from_partial(chunk, idx, f.size(), proof) == f.root()
            assert root_from_partial(chunk, idx, 8, proof) == f.root()
            assert verify_chunk(f.root(), chunk, idx, f.size(), proof)

    def test_last_chunk_proof_starts_with_filler(self, seven_chunk_data):
        chunk, proof = File(seven_chunk_data).get_chunk(6)

        assert len(chunk) == 1
        assert proof[0] == FILLER_HASH

    @pytest.mark.parametrize("idx", [7, 8, 100, -1])
    def test_out_of_range(self, seven_chunk_data, idx):
        f = File(seven_chunk_data)

        with pytest.raises(ChunkIndexError) as exc_info:
            f.get_chunk(idx)

        assert exc_info.value.details == {"idx": idx, "size": 7}

    def test_single_chunk_has_empty_proof(self):
        chunk, proof = File(b"hello").get_chunk(0)

        assert chunk.data == b"hello"
        assert proof == []


class TestPartialVerification:
    """Verifying pieces without the file."""

    def test_tampered_chunk_rejected(self, seven_chunk_data):
        f = File(seven_chunk_data)
        chunk, proof = f.get_chunk(3)
        evil = Chunk(data=b"\xff" + chunk.data[1:], leaf_idx=3)

        assert not verify_chunk(f.root(), evil, 3, f.size(), proof)

    def test_wrong_root_rejected(self, seven_chunk_data):
        f = File(seven_chunk_data)
        chunk, proof = f.get_chunk(3)

        assert not verify_chunk(Sha256Hash(bytes(range(32))), chunk, 3, f.size(), proof)

    def test_bad_proof_length_raises(self, seven_chunk_data):
        f = File(seven_chunk_data)
        chunk, proof = f.get_chunk(3)

        with pytest.raises(FileMerkleError) as exc_info:
            root_from_partial(chunk, 3, f.size(), proof[:2])

        assert exc_info.value.details["merkle_code"] == "INVALID_IDX"

    def test_bad_proof_length_verify_false(self, seven_chunk_data):
        f = File(seven_chunk_data)
        chunk, proof = f.get_chunk(3)

        assert not verify_chunk(f.root(), chunk, 3, f.size(), proof[:2])

    def test_raw_bytes_accepted(self, seven_chunk_data):
        f = File(seven_chunk_data)
        chunk, proof = f.get_chunk(6)

        assert root_from_partial(chunk.data, 6, 7, proof) == f.root()
