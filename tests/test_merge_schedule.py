import io

import pytest

from blockscan.merge_schedule import MergeSchedule, format_schedule, print_schedule


def test_single_block():
    sched = MergeSchedule(1, 10.0)
    assert sched.left_size(1) == 0
    assert sched.right_size(1) == 1
    assert sched.cost(1) == 0.0


def test_two_blocks_split_evenly():
    sched = MergeSchedule(2, 10.0)
    assert sched.left_size(2) == 1
    assert sched.right_size(2) == 1
    assert sched.n_left_merges(2) == pytest.approx(0.5)
    assert sched.n_right_merges(2) == pytest.approx(0.5)


@pytest.mark.parametrize("n", [2, 5, 9, 16])
@pytest.mark.parametrize("ratio", [1.0, 10.0, 0.1])
def test_sizes_sum_to_n(n, ratio):
    sched = MergeSchedule(n, ratio)
    for m in range(2, n + 1):
        assert sched.left_size(m) + sched.right_size(m) == m
        assert 1 <= sched.left_size(m) <= m - 1


def test_max_left_size_caps_split():
    sched = MergeSchedule(12, 10.0, 1)
    for m in range(2, 13):
        assert sched.left_size(m) == 1
        assert sched.right_size(m) == m - 1


def test_max_left_size_respected():
    sched = MergeSchedule(20, 0.5, 3)
    for m in range(2, 21):
        assert sched.left_size(m) <= 3


def test_costs_are_consistent_with_splits():
    sched = MergeSchedule(15, 10.0)
    for m in range(2, 16):
        l = sched.left_size(m)
        r = m - l
        left_total = l + sched.n_left_merges(l) * l + sched.n_left_merges(r) * r
        right_total = r + sched.n_right_merges(l) * l + sched.n_right_merges(r) * r
        assert sched.n_left_merges(m) * m == pytest.approx(left_total)
        assert sched.n_right_merges(m) * m == pytest.approx(right_total)
        assert sched.cost(m) * m == pytest.approx(left_total + 10.0 * right_total)


def test_high_ratio_prefers_larger_left():
    sched = MergeSchedule(8, 100.0)
    assert sched.left_size(8) >= sched.right_size(8)


def test_reset_changes_schedule():
    sched = MergeSchedule(6, 10.0)
    sched.reset(6, 10.0, 1)
    assert sched.left_size(6) == 1


def test_out_of_range_query():
    sched = MergeSchedule(4, 10.0)
    with pytest.raises(IndexError):
        sched.left_size(5)
    with pytest.raises(IndexError):
        sched.cost(0)


def test_zero_blocks_rejected():
    with pytest.raises(ValueError):
        MergeSchedule(0, 10.0)


def test_format_two_blocks():
    sched = MergeSchedule(2, 10.0)
    assert format_schedule(sched, 2) == "2\t1\n\t1\n"


def test_format_single_block():
    sched = MergeSchedule(1, 10.0)
    assert format_schedule(sched, 1) == "1\n"


def test_format_leaf_count():
    sched = MergeSchedule(7, 10.0)
    text = format_schedule(sched, 7)
    leaves = [line for line in text.splitlines() if line.endswith("1") and line.strip(":\t") == "1" or line.endswith("\t1")]
    assert text.count("1\n") >= 1
    assert text.splitlines()[0].startswith("7\t")
    assert len(text.splitlines()) == 7
    assert leaves


def test_print_schedule_to_file():
    sched = MergeSchedule(5, 10.0)
    buf = io.StringIO()
    print_schedule(sched, 5, buf)
    assert buf.getvalue() == format_schedule(sched, 5)