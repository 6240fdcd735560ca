"""Paged array: a sequence stored as fixed-size pages reachable via a page index."""

from __future__ import annotations

import random
from typing import Any, Iterable

__all__ = ["PageArray"]


class PageArray:
    """A sequence stored in pages of ``2 ** pagesize_log`` elements.

    The elements are right-aligned in the page grid: the first page holds
    only the last ``length % pagesize`` slots when the length is not a
    multiple of the page size.  A page index maps every logical page to a
    physical page of the backing storage, so pages can be moved around
    without changing the logical contents;
    :meth:`permute_to_plain_array` restores the physical order.
    """

    def __init__(self, values: Iterable[Any], pagesize_log: int = 12) -> None:
        if pagesize_log < 0:
            raise ValueError("pagesize_log must be non-negative")
        items = list(values)
        self.pagesize_log = pagesize_log
        self.pagesize = 1 << pagesize_log
        self._mask = self.pagesize - 1
        self._length = len(items)
        self._shift = (self.pagesize - self._length % self.pagesize) % self.pagesize
        self._n_pages = (self._length + self.pagesize - 1) // self.pagesize
        self._data: list[Any] = [None] * self._shift + items
        self._index = list(range(self._n_pages))

    def __len__(self) -> int:
        return self._length

    def _position(self, i: int) -> int:
        if i < 0:
            i += self._length
        if not 0 <= i < self._length:
            raise IndexError(f"index {i} out of range [0, {self._length})")
        i += self._shift
        return (self._index[i >> self.pagesize_log] << self.pagesize_log) + (
            i & self._mask
        )

    def __getitem__(self, i: int) -> Any:
        return self._data[self._position(i)]

    def __setitem__(self, i: int, value: Any) -> None:
        self._data[self._position(i)] = value

    def page_offset(self, i: int) -> int:
        """Offset of element ``i`` inside its page."""
        return (i + self._shift) & self._mask

    def page_id(self, i: int) -> int:
        """Logical page holding element ``i``."""
        return (i + self._shift) >> self.pagesize_log

    def _page_slice(self, page: int) -> slice:
        start = page << self.pagesize_log
        return slice(start, start + self.pagesize)

    def random_shuffle(self, rng: random.Random | None = None) -> None:
        """Scramble the physical placement of the full pages.

        Both the page contents and the page index are swapped, so the
        logical contents stay the same.
        """
        rng = rng if rng is not None else random.Random()
        first_full = 1 if self._shift else 0
        full_pages = range(first_full, self._n_pages)
        if not full_pages:
            return
        for _ in range(2 * len(full_pages)):
            i = rng.choice(full_pages)
            j = rng.choice(full_pages)
            pi, pj = self._index[i], self._index[j]
            si, sj = self._page_slice(pi), self._page_slice(pj)
            self._data[si], self._data[sj] = self._data[sj], self._data[si]
            self._index[i], self._index[j] = pj, pi

    def permute_to_plain_array(self, max_threads: int = 1) -> None:
        """Move every page to its own physical slot, following permutation cycles.

        ``max_threads`` must be at least 1; the cycles are followed in a
        single pass.
        """
        if max_threads < 1:
            raise ValueError("max_threads must be at least 1")
        for start in range(self._n_pages):
            if self._index[start] == start:
                continue
            saved = self._data[self._page_slice(start)]
            cur = start
            while True:
                src = self._index[cur]
                self._index[cur] = cur
                if src == start:
                    self._data[self._page_slice(cur)] = saved
                    break
                self._data[self._page_slice(cur)] = self._data[self._page_slice(src)]
                cur = src

    def to_list(self) -> list[Any]:
        """Return the logical contents as a plain list."""
        return [self[i] for i in range(self._length)]