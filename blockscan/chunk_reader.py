"""Reads a byte range of a file in fixed-size chunks, one chunk ahead."""

from __future__ import annotations

import threading

__all__ = ["BackgroundChunkReader"]


class BackgroundChunkReader:
    """Reads ``[beg, end)`` of a file chunk by chunk in a background thread.

    After ``wait(pos)`` returns, :attr:`chunk` holds the bytes of the file
    that end at offset ``pos``, and the next chunk is being read.
    """

    def __init__(
        self, filename: str, beg: int, end: int, chunk_length: int = 1 << 20
    ) -> None:
        if beg > end:
            raise ValueError("beg > end in BackgroundChunkReader")
        if chunk_length <= 0:
            raise ValueError("chunk_length must be positive")
        self._chunk_length = chunk_length
        self._end = end
        self._cur = beg
        self._delivered = beg
        self.chunk = b""
        self._passive = b""
        self._cv = threading.Condition()
        self._read_next = True
        self._stop = False
        self._error: Exception | None = None
        self._closed = False
        self._file = None
        self._thread = None
        if beg == end:
            return
        self._file = open(filename, "rb")
        self._file.seek(beg)
        self._thread = threading.Thread(target=self._io_loop, daemon=True)
        self._thread.start()

    def _io_loop(self) -> None:
        while True:
            with self._cv:
                while not self._read_next and not self._stop:
                    self._cv.wait()
                if self._stop:
                    return
                self._read_next = False
                length = min(self._chunk_length, self._end - self._cur)
            try:
                data = self._file.read(length)
                if len(data) != length:
                    raise EOFError(f"wanted {length} bytes, got {len(data)}")
            except (OSError, EOFError) as exc:
                with self._cv:
                    self._error = exc
                    self._cv.notify_all()
                return
            with self._cv:
                self._passive = data
                self._cur += length
                self._cv.notify_all()

    def wait(self, end: int) -> None:
        """Wait until the chunk ending at ``end`` is read and make it current."""
        if end > self._end:
            raise ValueError("end > range end in BackgroundChunkReader")
        target = min(self._delivered + self._chunk_length, self._end)
        if target == self._delivered:
            raise ValueError("the whole range was already delivered")
        if end != target:
            raise ValueError(f"the next chunk ends at {target}, not at {end}")
        with self._cv:
            while self._cur != end and self._error is None:
                self._cv.wait()
            if self._error is not None:
                raise self._error
            self.chunk, self._passive = self._passive, b""
            self._delivered = end
            self._read_next = True
            self._cv.notify_all()

    def chunk_size(self) -> int:
        return self._chunk_length

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        with self._cv:
            self._stop = True
            self._cv.notify_all()
        if self._thread is not None:
            self._thread.join()
        if self._file is not None:
            self._file.close()

    def __enter__(self) -> "BackgroundChunkReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()