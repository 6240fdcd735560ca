"""Ranks of tail suffixes among the suffixes of a block.

A block ``text[block_beg:block_end)`` comes with its partial suffix array
``block_psa``: the offsets (relative to ``block_beg``) of the block's
suffixes, sorted by the full suffixes of the text.  For a pattern that
starts at ``pat_beg`` in the tail following the block, the functions here
narrow down the range of ``block_psa`` in which the suffix starting at
``pat_beg`` belongs.  The text of the pattern is read from disk in chunks.

When a block suffix runs out before the comparison is decided, the
comparison is settled with a bit of ``tail_gt_begin_reversed``: bit
``text_length - j`` tells whether the suffix starting at ``j`` is greater
than the suffix starting at the end of the block.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from .bit_stream_reader import MultifileBitStreamReader
from .chunk_reader import BackgroundChunkReader
from .multifile import Multifile
from .utils import log2ceil

__all__ = [
    "lcp_compare",
    "refine_range",
    "compute_single_initial_rank",
    "compute_initial_ranges",
]

_MIN_DISCREPANCY = 1 << 16
_BALANCING_FACTOR = 64
_CHUNK_LENGTH = 1 << 20


class _Offset:
    """Read-only view of a sequence whose index 0 stands at ``shift``."""

    __slots__ = ("_data", "_shift")

    def __init__(self, data: Sequence[int], shift: int) -> None:
        self._data = data
        self._shift = shift

    def __getitem__(self, i: int) -> int:
        return self._data[i - self._shift]


def lcp_compare(
    text: Any,
    text_length: int,
    block_end: int,
    block_suf_beg: int,
    pat: Any,
    pat_beg: int,
    pat_length: int,
    gt_reader: Any,
    lcp: int,
) -> tuple[int, int]:
    """Compare the pattern with the block suffix starting at ``block_suf_beg``.

    ``text`` is indexed by absolute text positions and only
    ``text[block_suf_beg + lcp:block_end)`` is read; ``pat`` is indexed
    from the pattern start and only ``pat[lcp:pat_length)`` is read.  The
    first ``lcp`` symbols are known to match.

    Returns ``(result, lcp)``: ``result`` is 1 if the pattern is greater,
    -1 if it is smaller and 0 if the pattern is a prefix of the suffix
    (and does not reach the end of the text); ``lcp`` is the extended
    common prefix length.
    """
    while (
        block_suf_beg + lcp < block_end
        and lcp < pat_length
        and text[block_suf_beg + lcp] == pat[lcp]
    ):
        lcp += 1
    if block_suf_beg + lcp >= block_end:
        j = pat_beg + (block_end - block_suf_beg)
        return (1 if gt_reader.access(text_length - j) else -1), lcp
    if lcp == pat_length:
        return (-1 if pat_beg + pat_length >= text_length else 0), lcp
    return (1 if pat[lcp] > text[block_suf_beg + lcp] else -1), lcp


def _pick_mid(low: int, high: int, llcp: int, rlcp: int) -> int:
    if llcp + _MIN_DISCREPANCY < rlcp:
        d = rlcp - llcp
        logd = log2ceil(d)
        return low + 1 + ((high - low - 1) * _BALANCING_FACTOR * logd) // (
            d + _BALANCING_FACTOR * logd
        )
    if rlcp + _MIN_DISCREPANCY < llcp:
        d = llcp - rlcp
        logd = log2ceil(d)
        return high - 1 - ((high - low - 1) * _BALANCING_FACTOR * logd) // (
            d + _BALANCING_FACTOR * logd
        )
    return (low + high) // 2


def refine_range(
    block: Sequence[int],
    block_psa: Sequence[int],
    block_beg: int,
    block_end: int,
    pat_beg: int,
    text_length: int,
    left: int,
    right: int,
    old_lcp: int,
    new_lcp: int,
    pat: Any,
    gt_reader: Any,
) -> tuple[int, int]:
    """Narrow ``[left, right)`` from a match of ``old_lcp`` to ``new_lcp`` symbols.

    All suffixes in ``block_psa[left:right)`` share the first ``old_lcp``
    symbols with the pattern; ``pat`` is indexed from the pattern start and
    only ``pat[old_lcp:new_lcp)`` is read.  Returns the new range.
    """
    text = _Offset(block, block_beg)
    low = left - 1
    high = right
    llcp = rlcp = old_lcp

    while low + 1 != high:
        lcp = min(llcp, rlcp)
        mid = _pick_mid(low, high, llcp, rlcp)
        res, lcp = lcp_compare(
            text, text_length, block_end, block_beg + block_psa[mid],
            pat, pat_beg, new_lcp, gt_reader, lcp,
        )
        if res <= 0:
            high, rlcp = mid, lcp
        else:
            low, llcp = mid, lcp
    newleft = high

    if rlcp >= new_lcp:
        high = right
        rlcp = old_lcp
        while low + 1 != high:
            lcp = min(llcp, rlcp)
            mid = _pick_mid(low, high, llcp, rlcp)
            res, lcp = lcp_compare(
                text, text_length, block_end, block_beg + block_psa[mid],
                pat, pat_beg, new_lcp, gt_reader, lcp,
            )
            if res < 0:
                high, rlcp = mid, lcp
            else:
                low, llcp = mid, lcp
    return newleft, high


def compute_single_initial_rank(
    block: Sequence[int],
    block_psa: Sequence[int],
    block_beg: int,
    block_end: int,
    pat_beg: int,
    text_length: int,
    max_lcp: int,
    text_filename: str,
    tail_gt_begin_reversed: Multifile | None,
) -> tuple[int, int]:
    """Range of ``block_psa`` for the pattern ``text[pat_beg:pat_beg + max_lcp)``.

    The pattern is read from ``text_filename`` chunk by chunk and the range
    is refined after each chunk until it is empty or the whole pattern is
    used.
    """
    if pat_beg == text_length:
        return 0, 0

    block_size = block_end - block_beg
    pat_end = pat_beg + max_lcp
    left, right, lcp = 0, block_size, 0

    with MultifileBitStreamReader(tail_gt_begin_reversed) as gt_reader, \
            BackgroundChunkReader(
                text_filename, pat_beg, pat_end, _CHUNK_LENGTH
            ) as chunk_reader:
        while left != right and lcp < max_lcp:
            new_lcp = lcp + min(max_lcp - lcp, chunk_reader.chunk_size())
            chunk_reader.wait(pat_beg + new_lcp)
            pat = _Offset(chunk_reader.chunk, lcp)
            left, right = refine_range(
                block, block_psa, block_beg, block_end, pat_beg, text_length,
                left, right, lcp, new_lcp, pat, gt_reader,
            )
            lcp = new_lcp
    return left, right


def compute_initial_ranges(
    block: Sequence[int],
    block_psa: Sequence[int],
    block_beg: int,
    block_end: int,
    text_length: int,
    text_filename: str,
    tail_gt_begin_reversed: Multifile | None,
    max_threads: int,
    tail_end: int,
) -> list[tuple[int, int]]:
    """Ranges of ``block_psa`` for the starts of the streaming blocks of the tail.

    The tail ``[block_end, tail_end)`` is split into at most ``max_threads``
    streaming blocks; for each, the pattern is the streaming block itself.
    The ranges are computed in parallel and returned in tail order.
    """
    if max_threads < 1:
        raise ValueError("max_threads must be at least 1")
    tail_length = tail_end - block_end
    if tail_length <= 0:
        raise ValueError("the tail following the block is empty")
    stream_max_block_size = (tail_length + max_threads - 1) // max_threads
    n_threads = (tail_length + stream_max_block_size - 1) // stream_max_block_size

    def one(t: int) -> tuple[int, int]:
        beg = block_end + t * stream_max_block_size
        end = min(beg + stream_max_block_size, tail_end)
        return compute_single_initial_rank(
            block, block_psa, block_beg, block_end, beg, text_length,
            end - beg, text_filename, tail_gt_begin_reversed,
        )

    with ThreadPoolExecutor(max_workers=n_threads) as pool:
        return list(pool.map(one, range(n_threads)))