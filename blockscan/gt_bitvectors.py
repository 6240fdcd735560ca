"""Computation of the gt_end bitvectors of a text split into blocks.

The text is cut into blocks of ``max_block_size`` symbols, counted from
the right end (the first block may be shorter).  For a block
``[b, e)`` and a position ``pos`` inside it, bit
``text_length - e + (pos - b)`` of ``gt`` tells whether the suffix of the
supertext starting at ``pos`` is greater than the one starting at ``e``.
For the last block, ``e`` is the end of the text and the comparison is
made against the tail of the supertext that follows it.

Bits are computed with the string range matching scan: first every
block is compared against the ``max_block_size`` symbols that follow it,
leaving some bits undecided, and then the undecided bits are resolved
from right to left using the bits of the following block.
"""

from __future__ import annotations

from typing import Sequence

from .bit_stream_reader import MultifileBitStreamReader
from .bitvector import Bitvector
from .multifile import Multifile
from .srank import update_ms

__all__ = [
    "compute_partial_gt_end",
    "compute_final_gt",
    "compute_final_gt_last_bits",
    "compute_initial_gt_bitvectors",
]

# Matches shorter than this are not used to skip positions.
_SKIP_THRESHOLD = 100


def _scan_inner_block(
    data: bytes,
    begin: int,
    end: int,
    max_lcp: int,
    gt: Bitvector,
    undecided: Bitvector,
) -> bool:
    revbeg = len(data) - end
    range_size = end - begin
    pat = data[end : end + max_lcp]
    if len(pat) < max_lcp:
        raise ValueError("the pattern following the block extends past the text")

    all_decided = True
    i = el = s = p = 0
    i_max = el_max = s_max = p_max = 0
    while i < range_size:
        base = begin + i
        while el < max_lcp and data[base + el] == pat[el]:
            el += 1
            s, p = update_ms(pat, el, s, p)

        if el < max_lcp:
            if data[base + el] > pat[el]:
                gt.set(revbeg + i)
        else:
            undecided.set(revbeg + i)
            all_decided = False

        j = i_max
        if el > el_max:
            el, el_max = el_max, el
            s, s_max = s_max, s
            p, p_max = p_max, p
            i_max = i

        if el < _SKIP_THRESHOLD:
            i += 1
            el = 0
        elif p > 0 and 4 * p <= el and pat[:s] == pat[p : p + s]:
            for k in range(1, min(p, range_size - i)):
                if undecided.get(revbeg + j + k):
                    undecided.set(revbeg + i + k)
                if gt.get(revbeg + j + k):
                    gt.set(revbeg + i + k)
            i += p
            el -= p
        else:
            h = (el >> 2) + 1
            for k in range(1, min(h, range_size - i)):
                if undecided.get(revbeg + j + k):
                    undecided.set(revbeg + i + k)
                if gt.get(revbeg + j + k):
                    gt.set(revbeg + i + k)
            i += h
            el = s = p = 0
    return all_decided


def _scan_last_block(
    data: bytes,
    begin: int,
    end: int,
    gt: Bitvector,
    text_end: int,
    supertext_length: int,
    tail_gt_begin_rev: Multifile | None,
    tail_prefix: bytes | None,
) -> None:
    text_length = len(data)
    revbeg = text_length - end
    range_size = end - begin
    tail_length = supertext_length - text_end
    if tail_length < 0:
        raise ValueError("supertext_length is smaller than text_end")
    prefix_length = min(text_length, tail_length)
    tail = bytes(tail_prefix)[:prefix_length] if tail_prefix is not None else b""
    if len(tail) < prefix_length:
        raise ValueError(
            f"tail prefix of {prefix_length} symbols is needed, got {len(tail)}"
        )

    reader: MultifileBitStreamReader | None = None
    try:
        i = el = s = p = 0
        i_max = el_max = s_max = p_max = 0
        while i < range_size:
            base = begin + i
            while (
                i + el < range_size
                and el < tail_length
                and data[base + el] == tail[el]
            ):
                el += 1
                s, p = update_ms(tail, el, s, p)

            if el == tail_length:
                greater = True
            elif i + el == range_size:
                if reader is None:
                    reader = MultifileBitStreamReader(tail_gt_begin_rev)
                greater = not reader.access(tail_length - el)
            else:
                greater = data[base + el] > tail[el]
            if greater:
                gt.set(revbeg + i)

            j = i_max
            if el > el_max:
                el, el_max = el_max, el
                s, s_max = s_max, s
                p, p_max = p_max, p
                i_max = i

            if el < _SKIP_THRESHOLD:
                i += 1
                el = 0
            elif p > 0 and 4 * p <= el and tail[:s] == tail[p : p + s]:
                for k in range(1, min(p, range_size - i)):
                    if gt.get(revbeg + j + k):
                        gt.set(revbeg + i + k)
                i += p
                el -= p
            else:
                h = (el >> 2) + 1
                for k in range(1, min(h, range_size - i)):
                    if gt.get(revbeg + j + k):
                        gt.set(revbeg + i + k)
                i += h
                el = s = p = 0
    finally:
        if reader is not None:
            reader.close()


def compute_partial_gt_end(
    text,
    begin: int,
    end: int,
    max_lcp: int,
    gt: Bitvector,
    undecided: Bitvector,
    text_end: int,
    supertext_length: int,
    tail_gt_begin_rev: Multifile | None = None,
    tail_prefix: bytes | None = None,
) -> bool:
    """Compute the decidable gt bits of the block ``text[begin:end)``.

    A block that is not last is compared with the ``max_lcp`` symbols that
    follow it; positions matching all of them are marked in ``undecided``.
    The last block is compared with the tail of the supertext, whose first
    ``min(len(text), supertext_length - text_end)`` symbols must be given in
    ``tail_prefix``; ties running to the end of the text are settled with
    the bits of ``tail_gt_begin_rev``.

    Returns True when no bit of the block was left undecided.
    """
    data = bytes(text)
    if not 0 <= begin <= end <= len(data):
        raise ValueError(f"block [{begin}, {end}) is not inside the text")
    if end == len(data):
        _scan_last_block(
            data, begin, end, gt, text_end, supertext_length,
            tail_gt_begin_rev, tail_prefix,
        )
        return True
    return _scan_inner_block(data, begin, end, max_lcp, gt, undecided)


def _block_bounds(text_length: int, max_block_size: int, t: int, n_blocks: int):
    block_end = text_length - (n_blocks - 1 - t) * max_block_size
    block_beg = max(0, block_end - max_block_size)
    return block_beg, block_end


def compute_final_gt(
    text_length: int,
    max_block_size: int,
    mb_beg: int,
    mb_end: int,
    gt: Bitvector,
    undecided: Bitvector,
    all_decided: Sequence[bool],
) -> None:
    """Resolve the undecided bits at block offsets [mb_beg, mb_end).

    Blocks are processed right to left.  Offsets are counted from the end
    of each block; leading offsets whose bits would share a byte with the
    neighbouring micro-block are skipped and left to
    :func:`compute_final_gt_last_bits`.
    """
    n_blocks = (text_length + max_block_size - 1) // max_block_size
    for t in range(n_blocks - 2, -1, -1):
        if all_decided[t]:
            continue
        block_beg, block_end = _block_bounds(text_length, max_block_size, t, n_blocks)
        this_mb_beg = mb_beg
        this_mb_end = min(mb_end, block_end - block_beg)
        rev_beg = text_length - block_end
        rev_end = text_length - block_beg

        while ((rev_end - 1 - this_mb_beg) & 7) != 7:
            this_mb_beg += 1
        for j in range(this_mb_beg, this_mb_end):
            if undecided.get(rev_end - 1 - j) and gt.get(rev_beg - 1 - j):
                gt.set(rev_end - 1 - j)


def compute_final_gt_last_bits(
    text_length: int,
    max_block_size: int,
    mb_beg: int,
    mb_end: int,
    gt: Bitvector,
    undecided: Bitvector,
    all_decided: Sequence[bool],
) -> None:
    """Resolve the bits of the first block skipped by :func:`compute_final_gt`."""
    n_blocks = (text_length + max_block_size - 1) // max_block_size
    if n_blocks < 1 or all_decided[0]:
        return
    block_beg, block_end = _block_bounds(text_length, max_block_size, 0, n_blocks)
    rev_beg = text_length - block_end
    rev_end = text_length - block_beg

    aligned = mb_beg
    while ((rev_end - 1 - aligned) & 7) != 7:
        aligned += 1
    for j in range(mb_beg, aligned):
        if undecided.get(rev_end - 1 - j) and gt.get(rev_beg - 1 - j):
            gt.set(rev_end - 1 - j)


def compute_initial_gt_bitvectors(
    text,
    gt: Bitvector,
    max_block_size: int,
    max_threads: int = 1,
    text_end: int | None = None,
    supertext_length: int | None = None,
    tail_gt_begin_reversed: Multifile | None = None,
    tail_prefix: bytes | None = None,
) -> None:
    """Fill ``gt`` with the gt_end bits of every block of ``text``.

    ``text_end`` defaults to the length of the text and ``supertext_length``
    to ``text_end`` (no tail).  When there is more than one block,
    ``max_block_size`` must be a multiple of 8.  ``max_threads`` sets how
    the resolution step is divided into micro-blocks.
    """
    data = bytes(text)
    text_length = len(data)
    if text_end is None:
        text_end = text_length
    if supertext_length is None:
        supertext_length = text_end
    if max_block_size < 1:
        raise ValueError("max_block_size must be positive")
    if max_threads < 1:
        raise ValueError("max_threads must be at least 1")
    if len(gt) < text_length:
        raise ValueError("gt bitvector is shorter than the text")
    if text_length == 0:
        return

    n_blocks = (text_length + max_block_size - 1) // max_block_size
    if n_blocks > 1 and max_block_size % 8:
        raise ValueError("max_block_size must be a multiple of 8 for several blocks")

    undecided = Bitvector(text_length)
    all_decided = [
        compute_partial_gt_end(
            data, *_block_bounds(text_length, max_block_size, t, n_blocks),
            max_block_size, gt, undecided, text_end, supertext_length,
            tail_gt_begin_reversed, tail_prefix,
        )
        for t in range(n_blocks)
    ]

    max_microblock_size = (max_block_size + max_threads - 1) // max_threads
    while max_microblock_size & 7 and max_microblock_size < max_block_size:
        max_microblock_size += 1
    n_microblocks = (max_block_size + max_microblock_size - 1) // max_microblock_size
    microblocks = [
        (i * max_microblock_size, min((i + 1) * max_microblock_size, max_block_size))
        for i in range(n_microblocks)
    ]

    for mb_beg, mb_end in microblocks:
        compute_final_gt(
            text_length, max_block_size, mb_beg, mb_end, gt, undecided, all_decided
        )
    for mb_beg, mb_end in microblocks:
        compute_final_gt_last_bits(
            text_length, max_block_size, mb_beg, mb_end, gt, undecided, all_decided
        )