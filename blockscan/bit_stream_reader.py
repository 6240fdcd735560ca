"""Buffered reading of bits from a :class:`Multifile`."""

from __future__ import annotations

from typing import BinaryIO

from .multifile import Multifile

__all__ = ["MultifileBitStreamReader"]


class MultifileBitStreamReader:
    """Reads single bits, addressed by global index, from a set of files.

    Bits are stored LSB-first in each file; bit ``j`` of the file covering
    [beg, end) holds global index ``beg + j``.
    """

    BUFSIZE = 1 << 20  # bytes per buffer

    def __init__(self, multifile: Multifile | None) -> None:
        self._files = list(multifile.files_info) if multifile is not None else []
        self._file: BinaryIO | None = None
        self._file_beg = 0
        self._file_end = 0
        self._buffer = b""
        self._offset = 0  # first bit of the buffer, relative to the file
        self._filled = 0  # bits available in the buffer
        self._cur: int | None = None

    def access(self, i: int) -> bool:
        """Return the bit at global index ``i``."""
        if self._file is None or not self._file_beg <= i < self._file_end:
            self._open_file_for_index(i)
        rel = i - self._file_beg
        if not self._offset <= rel < self._offset + self._filled:
            self._refill(rel)
            if not self._offset <= rel < self._offset + self._filled:
                raise EOFError(f"bit {i} lies beyond the end of its file")
        rel -= self._offset
        return bool(self._buffer[rel >> 3] & (1 << (rel & 7)))

    def initialize_sequential_reading(self, i: int) -> None:
        """Position the sequential reader at global index ``i``."""
        self._open_file_for_index(i)
        self._cur = i

    def read(self) -> bool:
        """Return the next bit of the sequential stream."""
        if self._cur is None:
            raise RuntimeError("sequential reading was not initialized")
        bit = self.access(self._cur)
        self._cur += 1
        return bit

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "MultifileBitStreamReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _refill(self, offset: int) -> None:
        offset -= offset & 7
        assert self._file is not None
        self._file.seek(offset >> 3)
        self._buffer = self._file.read(self.BUFSIZE)
        span = self._file_end - self._file_beg - offset
        self._filled = max(0, min(span, 8 * len(self._buffer)))
        self._offset = offset

    def _open_file_for_index(self, i: int) -> None:
        self.close()
        info = next((f for f in self._files if f.beg <= i < f.end), None)
        if info is None:
            raise IndexError(f"no file covers bit index {i}")
        self._file = open(info.filename, "rb")
        self._file_beg = info.beg
        self._file_end = info.end
        self._offset = 0
        self._filled = 0
        self._refill(i - info.beg)