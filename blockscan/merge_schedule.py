"""Skewed merge schedule: how to split n blocks into left and right parts."""

from __future__ import annotations

import sys
from typing import TextIO

__all__ = ["MergeSchedule", "format_schedule", "print_schedule"]


class MergeSchedule:
    """Optimal split of ``no_of_blocks`` blocks for recursive merging.

    For every ``n`` up to ``no_of_blocks`` the schedule stores the number of
    blocks put on the left side, chosen to minimise
    ``left_cost + right_left_ratio * right_cost``.  ``max_left_size`` caps the
    left side; 0 means no cap.
    """

    def __init__(
        self, no_of_blocks: int, right_left_ratio: float, max_left_size: int = 0
    ) -> None:
        self.rl_ratio = 0.0
        self._split: list[int] = []
        self._left_cost: list[int] = []
        self._right_cost: list[int] = []
        self.reset(no_of_blocks, right_left_ratio, max_left_size)

    def reset(
        self, no_of_blocks: int, right_left_ratio: float, max_left_size: int = 0
    ) -> None:
        """Recompute the schedule for new parameters."""
        if no_of_blocks < 1:
            raise ValueError("the number of blocks must be at least 1")
        n = no_of_blocks
        self.rl_ratio = float(right_left_ratio)
        if max_left_size == 0:
            max_left_size = n - 1

        split = [0] * (n + 1)
        left_cost = [0] * (n + 1)
        right_cost = [0] * (n + 1)

        for i in range(2, n + 1):
            max_l = min(i - 1, max_left_size)
            min_cost = float("inf")
            for l in range(1, max_l + 1):
                r = i - l
                l_cost = l + left_cost[l] + left_cost[r]
                r_cost = r + right_cost[l] + right_cost[r]
                total_cost = l_cost + self.rl_ratio * r_cost
                if total_cost < min_cost:
                    min_cost = total_cost
                    split[i] = l
                    left_cost[i] = l_cost
                    right_cost[i] = r_cost

        self._split = split
        self._left_cost = left_cost
        self._right_cost = right_cost

    def _check(self, n: int) -> None:
        if not 1 <= n < len(self._split):
            raise IndexError(f"n = {n} outside the schedule [1, {len(self._split) - 1}]")

    def left_size(self, n: int) -> int:
        self._check(n)
        return self._split[n]

    def right_size(self, n: int) -> int:
        self._check(n)
        return n - self._split[n]

    def cost(self, n: int) -> float:
        self._check(n)
        return (self._left_cost[n] + self.rl_ratio * self._right_cost[n]) / n

    def n_left_merges(self, n: int) -> float:
        self._check(n)
        return self._left_cost[n] / n

    def n_right_merges(self, n: int) -> float:
        self._check(n)
        return self._right_cost[n] / n


def format_schedule(sched: MergeSchedule, n: int, indent: str = "\t") -> str:
    """Render the schedule tree for ``n`` blocks as text."""
    if n == 1:
        return "1\n"
    l = sched.left_size(n)
    return (
        f"{n}\t"
        + format_schedule(sched, l, indent + ":\t")
        + indent
        + format_schedule(sched, n - l, indent + "\t")
    )


def print_schedule(sched: MergeSchedule, n: int, file: TextIO | None = None) -> None:
    """Write the schedule tree for ``n`` blocks to ``file`` (stderr by default)."""
    out = sys.stderr if file is None else file
    out.write(format_schedule(sched, n))