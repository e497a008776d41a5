"""Byte streams that records are read from."""

from __future__ import annotations

import os
from typing import BinaryIO

__all__ = ["LocalFileStream"]


class LocalFileStream:
    """Random-access binary reading from a file on the local disk."""

    def __init__(self) -> None:
        self._file: BinaryIO | None = None

    def _require_open(self) -> BinaryIO:
        if self._file is None:
            raise ValueError("stream is not open")
        return self._file

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self, filename: str | os.PathLike) -> None:
        """Open ``filename`` for binary reading, closing any open file first."""
        self.close()
        self._file = open(filename, "rb")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def size(self) -> int:
        """Total size of the file in bytes; the current position is kept."""
        stream = self._require_open()
        pos = stream.tell()
        stream.seek(0, os.SEEK_END)
        last = stream.tell()
        stream.seek(pos, os.SEEK_SET)
        return last

    def position(self) -> int:
        return self._require_open().tell()

    def seek(self, pos: int) -> int:
        """Move to absolute position ``pos`` and return it."""
        self._require_open().seek(pos, os.SEEK_SET)
        return pos

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes from the current position."""
        return self._require_open().read(size)

    def __enter__(self) -> "LocalFileStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()