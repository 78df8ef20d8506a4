"""
File Repository
Catalog of Files keyed by the hex encoding of their own root hash.

Sharing Model:
    Reads (list, get, get_piece) never mutate state and may run from many
    handlers at once. Mutation (add, remove) must happen-before any
    concurrent reads: populate the repository first, then share it.
"""
from __future__ import annotations

import logging
from pathlib import Path

from pmtorrent.files.file import File
from pmtorrent.schemas.errors import DoesntExistError, FileError, RepoError
from pmtorrent.schemas.transport import FileDescription, Piece


logger = logging.getLogger(__name__)


class Repository:
    """
    Content-addressed catalog of files.

    Example:
        >>> repo = Repository()
        >>> key = repo.add(File(b"hello"))
        >>> [d.pieces for d in repo.list()]
        [1]
        >>> piece = repo.get_piece(key, 0)
    """

    def __init__(self) -> None:
        self._files: dict[str, File] = {}

    def add(self, file: File) -> str:
        """
        Insert a file under the hex encoding of its root.

        Re-inserting identical content overwrites the same key.

        Returns:
            The catalog key (lowercase hex root hash)
        """
        key = file.root().hex()
        self._files[key] = file
        logger.debug("Added file %s (%d pieces)", key, file.size())
        return key

    def add_bytes(self, data: bytes) -> str:
        """
        Build a File from a buffer and add it.

        Raises:
            RepoError: Wrapping the FileError raised during construction
        """
        try:
            file = File(data)
        except FileError as e:
            raise RepoError.from_file_error(e) from e
        return self.add(file)

    def add_path(self, path: str | Path) -> str:
        """
        Build a File from a path on disk and add it.

        Raises:
            RepoError: Wrapping the FileError raised during construction
            OSError: If the path cannot be read
        """
        try:
            file = File.from_path(path)
        except FileError as e:
            raise RepoError.from_file_error(e) from e
        logger.info("Loaded %s as %s", path, file.root().hex())
        return self.add(file)

    def remove(self, hash_hex: str) -> File:
        """
        Remove and return the file stored under hash_hex.

        Raises:
            DoesntExistError: If no file is stored under hash_hex
        """
        key = hash_hex.lower()
        try:
            return self._files.pop(key)
        except KeyError:
            raise DoesntExistError(hash_hex=key) from None

    def get(self, hash_hex: str) -> File:
        """
        Look up a file by its hex root hash.

        Raises:
            DoesntExistError: If no file is stored under hash_hex
        """
        key = hash_hex.lower()
        file = self._files.get(key)
        if file is None:
            raise DoesntExistError(hash_hex=key)
        return file

    def list(self) -> list[FileDescription]:
        """One description per stored file, in no particular order."""
        return [
            FileDescription(hash=key, pieces=file.size())
            for key, file in self._files.items()
        ]

    def get_piece(self, hash_hex: str, idx: int) -> Piece:
        """
        Return chunk idx of the file stored under hash_hex with its proof.

        Raises:
            DoesntExistError: If the file or the chunk does not exist
            RepoFileError: If the file fails for any other reason
        """
        file = self.get(hash_hex)
        try:
            content, proof = file.get_chunk(idx)
        except FileError as e:
            raise RepoError.from_file_error(e) from e
        return Piece(content=content, proof=proof)

    def __contains__(self, hash_hex: object) -> bool:
        return isinstance(hash_hex, str) and hash_hex.lower() in self._files

    def __len__(self) -> int:
        return len(self._files)


__all__ = ["Repository"]
