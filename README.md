# blockscan

Components for building suffix arrays of texts split into blocks. Each
block's suffixes are compared against the text that follows the block, and
the results are kept in bitvectors on disk and in rank ranges that a block
merger can use.

## Modules

- `blockscan.utils`: wall-clock time (`wclock`), file helpers (`file_size`,
  `file_exists`, `file_delete`, `absolute_path`, `read_block`), random
  helpers (`random_int`, `random_long`, `fill_random_string`,
  `fill_random_letters`, `random_string_hash`) and `log2ceil` / `log2floor`.
- `blockscan.bitvector.Bitvector`: a packed bit array (LSB-first in each
  byte) with `get`, `set`, `reset`, `flip`, `range_sum`, `save` and
  `Bitvector.from_file`.
- `blockscan.multifile.Multifile`: a list of `SingleFileInfo` entries, each
  a file covering a range `[beg, end)` of one index space. `delete_files`,
  or leaving a `with` block, deletes the files.
- `blockscan.bit_stream_reader.MultifileBitStreamReader`: reads bits of a
  `Multifile` by global index (`access`) or one after another
  (`initialize_sequential_reading`, then `read`).
- `blockscan.stream_info.StreamInfo`: a thread-safe progress record for
  several streaming threads (`update`, `total_streamed`, `progress`).
- `blockscan.srank.update_ms`: extends the maximal-suffix decomposition of
  a prefix by one symbol.
- `blockscan.async_writers.AsyncStreamWriter` and `AsyncBitStreamWriter`:
  double-buffered writers that hand full buffers to a background thread.
  `AsyncStreamWriter` writes values of one `array` typecode;
  `AsyncBitStreamWriter` packs bits LSB-first and pads the last byte with
  zeros.
- `blockscan.vbyte_reader.AsyncVByteStreamReader`: decodes variable-byte
  integers (7 bits per byte, low bits first) while the next buffer is read
  in the background; `read` raises `EOFError` at the end of the data.
- `blockscan.chunk_reader.BackgroundChunkReader`: reads a byte range of a
  file chunk by chunk, one chunk ahead; `wait(pos)` makes the chunk ending
  at `pos` available as `chunk`.
- `blockscan.merge_schedule.MergeSchedule`: the cost-optimal split of `n`
  blocks into left and right parts for recursive merging, with
  `format_schedule` and `print_schedule` to show the resulting tree.
- `blockscan.pagearray.PageArray`: a sequence stored in pages reached
  through a page index; `random_shuffle` scrambles the physical page order
  without changing the contents, and `permute_to_plain_array` restores it.
- `blockscan.gt_bitvectors`: for every position of each block, computes
  whether the suffix starting there is greater than the suffix starting at
  the end of its block (`compute_initial_gt_bitvectors`, built on
  `compute_partial_gt_end`, `compute_final_gt` and
  `compute_final_gt_last_bits`).
- `blockscan.initial_ranks`: given a block and its partial suffix array,
  narrows down where suffixes of the following tail fall among the block's
  suffixes (`lcp_compare`, `refine_range`, `compute_single_initial_rank`,
  `compute_initial_ranges`), reading the tail from disk in chunks.

## Installation

    pip install .

## Example

    from blockscan.bitvector import Bitvector
    from blockscan.merge_schedule import MergeSchedule, print_schedule

    bv = Bitvector(100)
    bv.set(3)
    bv.set(70)
    print(bv.range_sum(0, 100))   # 2

    schedule = MergeSchedule(8, 10.0, 0)
    print(schedule.left_size(8))
    print_schedule(schedule, 8)

Readers and writers are context managers, so their background threads stop
and their files close when the `with` block ends:

    from blockscan.async_writers import AsyncStreamWriter

    with AsyncStreamWriter("values.bin", "q", 1 << 20) as writer:
        for value in range(1000):
            writer.write(value)

## What this package does not do

It does not build a suffix array by itself. There is no suffix sorting of a
block, no gap array computation, no merging of sorted blocks and no
command-line tool. `compute_initial_ranges` returns ranges of candidate
positions; it does not narrow them down to single ranks.

## Tests

    pip install .[test]
    pytest