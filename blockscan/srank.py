"""Incremental maximal-suffix (ms) decomposition."""

from __future__ import annotations

from typing import Sequence

__all__ = ["update_ms"]


def update_ms(text: Sequence, length: int, s: int, p: int) -> tuple[int, int]:
    """Extend the ms-decomposition of ``text[:length - 1]`` to ``text[:length]``.

    ``s`` is the start of the lexicographically maximal suffix and ``p``
    its smallest period; the updated pair is returned.
    """
    if length == 1:
        return 0, 1
    i = length - 1
    while i < length:
        a = text[i - p]
        b = text[i]
        if a > b:
            p = i - s + 1
        elif a < b:
            i -= (i - s) % p
            s = i
            p = 1
        i += 1
    return s, p