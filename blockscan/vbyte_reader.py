"""Reading of variable-byte encoded integers with background prefetching."""

from __future__ import annotations

import threading

__all__ = ["AsyncVByteStreamReader"]


class AsyncVByteStreamReader:
    """Decodes a file of vbyte integers (7 bits per byte, low bits first,
    high bit set on every byte but the last).

    One buffer is decoded while the next is read in a background thread;
    ``bufsize`` is the total size in bytes of both buffers.
    """

    def __init__(self, filename: str, bufsize: int = 4 << 20) -> None:
        self._file = open(filename, "rb")
        self._buf_size = max(4096, bufsize) // 2
        self._active = b""
        self._pos = 0
        self._passive = b""
        self._cv = threading.Condition()
        self._pending = True  # start prefetching right away
        self._finished = False
        self._error: OSError | None = None
        self._closed = False
        self._thread = threading.Thread(target=self._io_loop, daemon=True)
        self._thread.start()

    def _io_loop(self) -> None:
        while True:
            with self._cv:
                while not self._pending and not self._finished:
                    self._cv.wait()
                if not self._pending:
                    return
            try:
                data = self._file.read(self._buf_size)
            except OSError as exc:
                self._error = exc
                data = b""
            with self._cv:
                self._passive = data
                self._pending = False
                self._cv.notify_all()
            if self._finished:
                return

    def _receive_new_buffer(self) -> None:
        with self._cv:
            while self._pending:
                self._cv.wait()
            if self._error is not None:
                raise self._error
            self._active, self._passive = self._passive, b""
            self._pos = 0
            self._pending = True
            self._cv.notify_all()
        if not self._active:
            raise EOFError("no more vbyte data")

    def _next_byte(self) -> int:
        if self._pos >= len(self._active):
            self._receive_new_buffer()
        byte = self._active[self._pos]
        self._pos += 1
        return byte

    def read(self) -> int:
        """Decode and return the next integer; raise EOFError at the end."""
        if self._closed:
            raise ValueError("read from a closed reader")
        result = 0
        shift = 0
        while True:
            byte = self._next_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        with self._cv:
            self._finished = True
            self._cv.notify_all()
        self._thread.join()
        self._file.close()

    def __enter__(self) -> "AsyncVByteStreamReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()