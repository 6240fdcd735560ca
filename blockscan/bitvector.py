"""A fixed-size bit vector stored LSB-first in a byte array."""

from __future__ import annotations

__all__ = ["Bitvector"]


class Bitvector:
    """Bit vector of a given length, all bits initially zero.

    Bit ``i`` lives in byte ``i >> 3`` at position ``i & 7``; the on-disk
    form is exactly those bytes.
    """

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError("length must be non-negative")
        self._length = length
        self._data = bytearray((length + 7) // 8)

    @classmethod
    def from_file(cls, filename: str) -> "Bitvector":
        """Load a bit vector saved with :meth:`save`."""
        with open(filename, "rb") as f:
            data = f.read()
        bv = cls(8 * len(data))
        bv._data[:] = data
        return bv

    def __len__(self) -> int:
        return self._length

    def _check(self, i: int) -> None:
        if not 0 <= i < self._length:
            raise IndexError(f"bit index {i} out of range [0, {self._length})")

    def get(self, i: int) -> bool:
        self._check(i)
        return bool(self._data[i >> 3] & (1 << (i & 7)))

    def set(self, i: int) -> None:
        self._check(i)
        self._data[i >> 3] |= 1 << (i & 7)

    def reset(self, i: int) -> None:
        self._check(i)
        self._data[i >> 3] &= ~(1 << (i & 7)) & 0xFF

    def flip(self, i: int) -> None:
        self._check(i)
        self._data[i >> 3] ^= 1 << (i & 7)

    def save(self, filename: str) -> None:
        """Write the raw bytes of the vector to ``filename``."""
        with open(filename, "wb") as f:
            f.write(self._data)

    def range_sum(self, beg: int, end: int) -> int:
        """Number of 1 bits in the range [beg, end)."""
        if end <= beg:
            return 0
        if beg < 0 or end > self._length:
            raise IndexError(f"range [{beg}, {end}) out of [0, {self._length})")
        chunk = self._data[beg >> 3 : (end + 7) >> 3]
        value = int.from_bytes(chunk, "little") >> (beg & 7)
        value &= (1 << (end - beg)) - 1
        return bin(value).count("1")