"""Shared progress record for streaming worker threads."""

from __future__ import annotations

import threading

from .utils import wclock

__all__ = ["StreamInfo"]


class StreamInfo:
    """Progress information shared by ``thread_count`` streaming threads."""

    def __init__(self, thread_count: int, tostream: int) -> None:
        self.update_count = 0
        self.thread_count = thread_count
        self.tostream = tostream
        self.timestamp = wclock()
        self.streamed = [0] * thread_count
        self.idle_update = [0.0] * thread_count
        self.idle_work = [0.0] * thread_count
        self.lock = threading.Lock()

    def update(self, thread_id: int, streamed: int) -> None:
        """Record that thread ``thread_id`` has streamed ``streamed`` bytes."""
        if not 0 <= thread_id < self.thread_count:
            raise IndexError(f"thread id {thread_id} out of range")
        with self.lock:
            self.streamed[thread_id] = streamed
            self.update_count += 1

    def total_streamed(self) -> int:
        with self.lock:
            return sum(self.streamed)

    def progress(self) -> float:
        """Fraction of the total length streamed so far, in [0, 1]."""
        if self.tostream <= 0:
            return 1.0
        return min(1.0, self.total_streamed() / self.tostream)