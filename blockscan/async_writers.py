"""Double-buffered writers that hand full buffers to a background I/O thread."""

from __future__ import annotations

import threading
from array import array

__all__ = ["AsyncStreamWriter", "AsyncBitStreamWriter"]

_DEFAULT_BUFSIZE = 4 << 20


class _IOThread:
    """Owns the output file and the thread that writes buffers passed to it."""

    def __init__(self, filename: str) -> None:
        self._file = open(filename, "wb")
        self._cv = threading.Condition()
        self._pending = False  # a buffer is waiting for the I/O thread
        self._finished = False
        self._passive = b""
        self._error: OSError | None = None
        self._thread = threading.Thread(target=self._io_loop, daemon=True)
        self._thread.start()

    def _io_loop(self) -> None:
        while True:
            with self._cv:
                while not self._pending and not self._finished:
                    self._cv.wait()
                if not self._pending:
                    return
                data = self._passive
            try:
                self._file.write(data)
            except OSError as exc:
                self._error = exc
            with self._cv:
                self._pending = False
                self._passive = b""
                self._cv.notify_all()

    def send(self, data: bytes) -> None:
        """Pass a buffer to the I/O thread, waiting for the previous one first."""
        with self._cv:
            while self._pending:
                self._cv.wait()
            if self._error is not None:
                raise self._error
            self._passive = data
            self._pending = True
            self._cv.notify_all()

    def shutdown(self) -> None:
        """Let pending writes finish, stop the thread and close the file."""
        with self._cv:
            self._finished = True
            self._cv.notify_all()
        self._thread.join()
        self._file.close()
        if self._error is not None:
            raise self._error


class AsyncStreamWriter:
    """Writes values of one ``array`` typecode to a file in native binary form.

    ``bufsize`` is the total size in bytes of the two buffers together.
    """

    def __init__(
        self, filename: str, typecode: str = "q", bufsize: int = _DEFAULT_BUFSIZE
    ) -> None:
        self._active = array(typecode)
        itemsize = self._active.itemsize
        elems = max(2, (bufsize + itemsize - 1) // itemsize)
        self._buf_size = elems // 2
        self._closed = False
        self._io = _IOThread(filename)

    def write(self, value) -> None:
        if self._closed:
            raise ValueError("write to a closed writer")
        self._active.append(value)
        if len(self._active) == self._buf_size:
            self._io.send(self._active.tobytes())
            self._active = array(self._active.typecode)

    def close(self) -> None:
        """Write what is buffered, stop the I/O thread and close the file."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._active:
                self._io.send(self._active.tobytes())
                self._active = array(self._active.typecode)
        finally:
            self._io.shutdown()

    def __enter__(self) -> "AsyncStreamWriter":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class AsyncBitStreamWriter:
    """Writes a stream of bits, packed LSB-first into bytes.

    ``bufsize`` is the total size in bytes of the two buffers together.
    A final partial byte is padded with zero bits.
    """

    def __init__(self, filename: str, bufsize: int = _DEFAULT_BUFSIZE) -> None:
        self._buf_size = max(2, bufsize) // 2
        self._active = bytearray()
        self._byte = 0
        self._bit_pos = 0
        self._closed = False
        self._io = _IOThread(filename)

    def write(self, bit) -> None:
        if self._closed:
            raise ValueError("write to a closed writer")
        if bit:
            self._byte |= 1 << self._bit_pos
        self._bit_pos += 1
        if self._bit_pos == 8:
            self._active.append(self._byte)
            self._byte = 0
            self._bit_pos = 0
            if len(self._active) == self._buf_size:
                self._io.send(bytes(self._active))
                self._active = bytearray()

    def close(self) -> None:
        """Write what is buffered, stop the I/O thread and close the file."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._bit_pos:
                self._active.append(self._byte)
                self._byte = 0
                self._bit_pos = 0
            if self._active:
                self._io.send(bytes(self._active))
                self._active = bytearray()
        finally:
            self._io.shutdown()

    def __enter__(self) -> "AsyncBitStreamWriter":
        return self

    def __exit__(self, *args) -> None:
        self.close()