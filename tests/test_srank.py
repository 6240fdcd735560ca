import random

import pytest

from blockscan.srank import update_ms


def _max_suffix_start(t):
    return max(range(len(t)), key=lambda k: t[k:])


def _smallest_period(w):
    return next(q for q in range(1, len(w) + 1) if w[q:] == w[: len(w) - q])


def _decompositions(text):
    s = p = 0
    for length in range(1, len(text) + 1):
        s, p = update_ms(text, length, s, p)
        yield length, s, p


def test_length_one():
    assert update_ms(b"z", 1, 5, 5) == (0, 1)


def test_worked_example():
    results = list(_decompositions(b"aba"))
    assert results[-1] == (3, 1, 2)


@pytest.mark.parametrize("seed", range(6))
def test_matches_maximal_suffix_and_period(seed):
    rng = random.Random(seed)
    for _ in range(30):
        n = rng.randrange(1, 40)
        text = bytes(rng.choice(b"abc") for _ in range(n))
        for length, s, p in _decompositions(text):
            prefix = text[:length]
            assert s == _max_suffix_start(prefix)
            assert p == _smallest_period(prefix[s:])


def test_periodic_text():
    text = b"ba" * 20
    for length, s, p in _decompositions(text):
        assert s == 0
        assert p == (1 if length == 1 else 2)