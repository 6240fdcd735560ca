import random

import pytest

from blockscan.bit_stream_reader import MultifileBitStreamReader
from blockscan.bitvector import Bitvector
from blockscan.multifile import Multifile


def _make_file(path, bits):
    bv = Bitvector(len(bits))
    for i, b in enumerate(bits):
        if b:
            bv.set(i)
    bv.save(str(path))


@pytest.fixture
def two_files(tmp_path):
    rng = random.Random(11)
    first = [rng.random() < 0.5 for _ in range(10)]
    second = [rng.random() < 0.5 for _ in range(15)]
    _make_file(tmp_path / "a", first)
    _make_file(tmp_path / "b", second)
    mf = Multifile()
    mf.add_file(0, 10, str(tmp_path / "a"))
    mf.add_file(10, 25, str(tmp_path / "b"))
    return mf, first + second


def test_access_matches_bits(two_files):
    mf, bits = two_files
    with MultifileBitStreamReader(mf) as reader:
        assert [reader.access(i) for i in range(25)] == bits


def test_access_out_of_order(two_files):
    mf, bits = two_files
    with MultifileBitStreamReader(mf) as reader:
        for i in (20, 3, 24, 0, 11, 9):
            assert reader.access(i) == bits[i]


def test_sequential_read_crosses_files(two_files):
    mf, bits = two_files
    with MultifileBitStreamReader(mf) as reader:
        reader.initialize_sequential_reading(5)
        assert [reader.read() for _ in range(20)] == bits[5:25]


def test_access_outside_raises(two_files):
    mf, _ = two_files
    with MultifileBitStreamReader(mf) as reader:
        with pytest.raises(IndexError):
            reader.access(25)


def test_read_without_init_raises(two_files):
    mf, _ = two_files
    with MultifileBitStreamReader(mf) as reader:
        with pytest.raises(RuntimeError):
            reader.read()


def test_none_multifile_has_no_bits():
    reader = MultifileBitStreamReader(None)
    with pytest.raises(IndexError):
        reader.access(0)


def test_large_file_refill(tmp_path):
    n_bytes = (1 << 20) + 300
    rng = random.Random(5)
    data = bytes(rng.randrange(256) for _ in range(n_bytes))
    path = tmp_path / "big"
    path.write_bytes(data)
    mf = Multifile()
    mf.add_file(100, 100 + 8 * n_bytes, str(path))

    def expected(i):
        j = i - 100
        return bool(data[j >> 3] & (1 << (j & 7)))

    with MultifileBitStreamReader(mf) as reader:
        for i in (100, 8 * (n_bytes - 1) + 103, 150, 8 * (1 << 20) + 100, 8 * n_bytes + 99):
            assert reader.access(i) == expected(i)