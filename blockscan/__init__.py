"""Bitvectors, bit-stream files, background readers and writers, merge
schedules, paged arrays, gt bitvectors and initial rank ranges for block-wise
suffix array construction."""

__version__ = "0.1.0"