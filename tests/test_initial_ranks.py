import random

import pytest

from blockscan.bit_stream_reader import MultifileBitStreamReader
from blockscan.bitvector import Bitvector
from blockscan.initial_ranks import (
    compute_initial_ranges,
    compute_single_initial_rank,
    lcp_compare,
    refine_range,
)
from blockscan.multifile import Multifile


class _StubReader:
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def access(self, i):
        self.calls.append(i)
        return self.answer


def _setup(tmp_path, text, block_beg, block_end):
    n = len(text)
    fname = tmp_path / "text.bin"
    fname.write_bytes(text)
    block = text[block_beg:block_end]
    psa = sorted(range(len(block)), key=lambda k: text[block_beg + k :])
    bv = Bitvector(n - block_end)
    for j in range(block_end + 1, n + 1):
        if text[j:] > text[block_end:]:
            bv.set(n - j)
    gt_name = str(tmp_path / "gt.bin")
    bv.save(gt_name)
    mf = Multifile()
    mf.add_file(0, n - block_end, gt_name)
    return str(fname), block, psa, mf


def _true_rank(text, block_beg, block_end, pos):
    return sum(1 for p in range(block_beg, block_end) if text[p:] < text[pos:])


def _random_text(seed, n, alphabet=b"ab"):
    rng = random.Random(seed)
    return bytes(rng.choice(alphabet) for _ in range(n))


def test_lcp_compare_mismatch_greater():
    text = b"abcabd"
    res = lcp_compare(text, 6, 3, 0, b"abd", 3, 3, _StubReader(False), 0)
    assert res == (1, 2)


def test_lcp_compare_pattern_reaches_text_end():
    text = b"xyzxy"
    res, lcp = lcp_compare(text, 5, 3, 0, b"xy", 3, 2, _StubReader(True), 0)
    assert res == -1
    assert lcp == 2


def test_lcp_compare_pattern_is_prefix():
    text = b"xyzxyq"
    res, lcp = lcp_compare(text, 6, 3, 0, b"xy", 3, 2, _StubReader(True), 0)
    assert res == 0
    assert lcp == 2


@pytest.mark.parametrize("answer,expected", [(True, 1), (False, -1)])
def test_lcp_compare_block_runout_uses_gt_bit(answer, expected):
    text = b"abab"
    reader = _StubReader(answer)
    res, lcp = lcp_compare(text, 4, 2, 0, b"ab", 2, 2, reader, 0)
    assert res == expected
    assert lcp == 2
    assert reader.calls == [4 - (2 + 2)]


def test_lcp_compare_known_prefix_is_skipped():
    text = b"abcabd"
    # The first symbol is declared matching even though it is not compared.
    res, lcp = lcp_compare(text, 6, 3, 0, b"zbd", 3, 3, _StubReader(False), 1)
    assert (res, lcp) == lcp_compare(text, 6, 3, 0, b"abd", 3, 3, _StubReader(False), 0)


@pytest.mark.parametrize("seed", range(6))
def test_refine_range_two_steps_equal_one_step(tmp_path, seed):
    text = _random_text(seed, 50)
    block_beg, block_end = 8, 28
    n = len(text)
    _, block, psa, mf = _setup(tmp_path, text, block_beg, block_end)
    L = n - block_end
    pattern = text[block_end:]
    with MultifileBitStreamReader(mf) as reader:
        one = refine_range(block, psa, block_beg, block_end, block_end, n,
                           0, len(block), 0, L, pattern, reader)
        mid = refine_range(block, psa, block_beg, block_end, block_end, n,
                           0, len(block), 0, 5, pattern, reader)
        two = refine_range(block, psa, block_beg, block_end, block_end, n,
                           mid[0], mid[1], 5, L, pattern, reader)
    assert one == two
    assert mid[0] <= one[0] <= one[1] <= mid[1]


@pytest.mark.parametrize("seed", range(8))
def test_single_initial_rank_is_exact_for_whole_tail(tmp_path, seed):
    text = _random_text(seed, 60)
    block_beg, block_end = 10, 35
    n = len(text)
    fname, block, psa, mf = _setup(tmp_path, text, block_beg, block_end)
    left, right = compute_single_initial_rank(
        block, psa, block_beg, block_end, block_end, n, n - block_end, fname, mf
    )
    assert left == right == _true_rank(text, block_beg, block_end, block_end)


def test_single_initial_rank_periodic_text(tmp_path):
    text = b"ab" * 30
    block_beg, block_end = 4, 20
    n = len(text)
    fname, block, psa, mf = _setup(tmp_path, text, block_beg, block_end)
    left, right = compute_single_initial_rank(
        block, psa, block_beg, block_end, block_end, n, n - block_end, fname, mf
    )
    assert left == right == _true_rank(text, block_beg, block_end, block_end)


def test_single_initial_rank_at_text_end(tmp_path):
    text = b"abcabc"
    fname, block, psa, mf = _setup(tmp_path, text, 0, 3)
    assert compute_single_initial_rank(
        block, psa, 0, 3, len(text), len(text), 0, fname, mf
    ) == (0, 0)


@pytest.mark.parametrize("seed,threads", [(0, 2), (1, 3), (2, 4), (3, 5), (4, 7)])
def test_initial_ranges_contain_true_ranks(tmp_path, seed, threads):
    text = _random_text(seed, 64)
    block_beg, block_end = 6, 30
    n = len(text)
    fname, block, psa, mf = _setup(tmp_path, text, block_beg, block_end)
    ranges = compute_initial_ranges(
        block, psa, block_beg, block_end, n, fname, mf, threads, n
    )
    tail_length = n - block_end
    size = (tail_length + threads - 1) // threads
    assert len(ranges) == (tail_length + size - 1) // size
    for t, (left, right) in enumerate(ranges):
        pos = block_end + t * size
        assert 0 <= left <= right <= len(block)
        assert left <= _true_rank(text, block_beg, block_end, pos) <= right


def test_initial_ranges_single_thread_matches_single_rank(tmp_path):
    text = _random_text(11, 48, b"abc")
    block_beg, block_end = 0, 20
    n = len(text)
    fname, block, psa, mf = _setup(tmp_path, text, block_beg, block_end)
    ranges = compute_initial_ranges(
        block, psa, block_beg, block_end, n, fname, mf, 1, n
    )
    rank = _true_rank(text, block_beg, block_end, block_end)
    assert ranges == [(rank, rank)]


def test_initial_ranges_empty_tail_raises(tmp_path):
    text = b"abcabc"
    fname, block, psa, mf = _setup(tmp_path, text, 0, 3)
    with pytest.raises(ValueError):
        compute_initial_ranges(block, psa, 0, 3, 6, fname, mf, 2, 3)


def test_initial_ranges_bad_thread_count_raises(tmp_path):
    text = b"abcabc"
    fname, block, psa, mf = _setup(tmp_path, text, 0, 3)
    with pytest.raises(ValueError):
        compute_initial_ranges(block, psa, 0, 3, 6, fname, mf, 0, 6)