"""Small file, timing and randomness helpers shared across the package."""

from __future__ import annotations

import os
import random
import time

__all__ = [
    "wclock",
    "file_size",
    "file_exists",
    "file_delete",
    "absolute_path",
    "read_block",
    "random_int",
    "random_long",
    "fill_random_string",
    "fill_random_letters",
    "random_string_hash",
    "log2ceil",
    "log2floor",
]


def wclock() -> float:
    """Return wall-clock time in seconds."""
    return time.time()


def file_size(fname: str) -> int:
    """Return the size of a file in bytes."""
    return os.path.getsize(fname)


def file_exists(fname: str) -> bool:
    """Return True if the file can be opened for reading."""
    try:
        with open(fname, "rb"):
            return True
    except OSError:
        return False


def file_delete(fname: str) -> None:
    """Delete a file; raise OSError if that fails."""
    os.remove(fname)


def absolute_path(fname: str) -> str:
    """Return the canonical absolute path of ``fname``.

    The file's directory must exist; a file that does not exist yet is
    created briefly to check that it could be, then removed again.
    """
    created = False
    if not file_exists(fname):
        with open(fname, "w"):
            pass
        created = True
    try:
        return os.path.realpath(fname)
    finally:
        if created:
            file_delete(fname)


def read_block(fname: str, beg: int, length: int) -> bytes:
    """Read ``length`` bytes of a file starting at offset ``beg``."""
    with open(fname, "rb") as f:
        f.seek(beg)
        data = f.read(length)
    if len(data) != length:
        raise EOFError(
            f"{fname}: wanted {length} bytes at offset {beg}, got {len(data)}"
        )
    return data


def random_int(p: int, r: int) -> int:
    """Return a random integer in the closed range [p, r]."""
    return random.randint(p, r)


def random_long(p: int, r: int) -> int:
    """Return a random (possibly large) integer in the closed range [p, r]."""
    return random.randint(p, r)


def fill_random_string(length: int, sigma: int) -> bytes:
    """Return ``length`` random symbols drawn from [0, sigma)."""
    return bytes(random.randrange(sigma) for _ in range(length))


def fill_random_letters(length: int, sigma: int) -> bytes:
    """Return ``length`` random letters drawn from the first ``sigma`` letters."""
    return bytes(ord("a") + random.randrange(sigma) for _ in range(length))


def random_string_hash() -> str:
    """Return a random decimal string suitable as a file-name suffix."""
    return str(random.getrandbits(62))


def log2ceil(x: int) -> int:
    """Smallest w such that 2**w >= x (0 for x <= 1)."""
    if x <= 1:
        return 0
    return (x - 1).bit_length()


def log2floor(x: int) -> int:
    """Largest w such that 2**w <= x (0 for x <= 1)."""
    if x <= 1:
        return 0
    return x.bit_length() - 1