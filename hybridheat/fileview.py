"""Writing a block-distributed 2D array to one binary file.

Four tasks on a 2 x 2 Cartesian grid each own a square block of a global
array of 16-bit values. The upper byte of every value marks the owning
task: 0x0A for rank 0, 0x0B for rank 1 and so on. The blocks can be
written one row at a time at explicit offsets, or through a subarray
file view.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from itertools import pairwise
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np

DIMS = (2, 2)
REQUIRED_TASKS = 4
LOCALSIZE = 4
RANK_MASK_BASE = 0x0A00
RANK_MASK_STEP = 0x0100

_DTYPE = np.dtype(np.uint16)
ITEMSIZE = _DTYPE.itemsize

PathLike = Union[str, os.PathLike]


def _check_tasks(ntasks: int) -> None:
    if ntasks != REQUIRED_TASKS:
        raise ValueError("This example works only with 4 MPI tasks!")


def _check_localsize(localsize: int) -> None:
    if localsize < 1:
        raise ValueError(f"local size must be positive, got {localsize}")


def cart_coords(rank: int, dims: Sequence[int]) -> tuple[int, ...]:
    """Return the row-major Cartesian coordinates of ``rank`` in ``dims``."""
    dims = tuple(dims)
    if not dims or any(extent < 1 for extent in dims):
        raise ValueError(f"invalid grid dimensions {dims}")
    return tuple(int(c) for c in np.unravel_index(rank, dims))


def local_block(rank: int, coords: Sequence[int], localsize: int) -> np.ndarray:
    """Return the ``localsize`` x ``localsize`` block owned by ``rank``.

    Each value is the element's column-major index in the global array,
    with the rank marker OR-ed into the upper byte.
    """
    _check_localsize(localsize)
    fullsize = 2 * localsize
    i = np.arange(localsize, dtype=np.int64)[:, None]
    j = np.arange(localsize, dtype=np.int64)[None, :]
    values = (i + coords[0] * localsize) + fullsize * (j + coords[1] * localsize)
    values = (values | (RANK_MASK_BASE + RANK_MASK_STEP * rank)) & 0xFFFF
    return values.astype(_DTYPE)


def row_offsets(coords: Sequence[int], localsize: int, fullsize: int) -> list[int]:
    """Return the byte offset in the file of every row of a local block."""
    return [
        ((coords[0] * localsize + i) * fullsize + coords[1] * localsize) * ITEMSIZE
        for i in range(localsize)
    ]


def _blocks(ntasks: int, localsize: int) -> Iterator[tuple[tuple[int, ...], np.ndarray]]:
    _check_tasks(ntasks)
    _check_localsize(localsize)
    for rank in range(ntasks):
        coords = cart_coords(rank, DIMS)
        yield coords, local_block(rank, coords, localsize)


def assemble(ntasks: int, localsize: int) -> np.ndarray:
    """Return the global array that the tasks' blocks make up together."""
    fullsize = 2 * localsize
    full = np.zeros((fullsize, fullsize), dtype=_DTYPE) if localsize > 0 else None
    for coords, block in _blocks(ntasks, localsize):
        r0 = coords[0] * localsize
        c0 = coords[1] * localsize
        full[r0:r0 + localsize, c0:c0 + localsize] = block
    return full


@contextmanager
def _open_for_write(path: PathLike) -> Iterator[BinaryIO]:
    """Open ``path`` for writing, creating it but not truncating it."""
    flags = os.O_CREAT | os.O_WRONLY | getattr(os, "O_BINARY", 0)
    fd = os.open(path, flags, 0o644)
    with os.fdopen(fd, "wb") as handle:
        yield handle


def write_rows(path: PathLike, ntasks: int, localsize: int) -> Path:
    """Write every task's block one row at a time at explicit offsets."""
    blocks = list(_blocks(ntasks, localsize))
    fullsize = 2 * localsize
    with _open_for_write(path) as handle:
        for coords, block in blocks:
            for offset, row in zip(row_offsets(coords, localsize, fullsize), block):
                handle.seek(offset)
                handle.write(row.tobytes())
    return Path(path)


def _subarray_displacements(
    sizes: tuple[int, int], subsizes: tuple[int, int], starts: tuple[int, int]
) -> np.ndarray:
    rows = np.arange(starts[0], starts[0] + subsizes[0])
    cols = np.arange(starts[1], starts[1] + subsizes[1])
    grid_rows, grid_cols = np.meshgrid(rows, cols, indexing="ij")
    return np.ravel_multi_index((grid_rows.ravel(), grid_cols.ravel()), sizes)


def _runs(displacements: np.ndarray) -> Iterator[tuple[int, int]]:
    breaks = (np.flatnonzero(np.diff(displacements) != 1) + 1).tolist()
    yield from pairwise([0, *breaks, len(displacements)])


def write_with_view(path: PathLike, ntasks: int, localsize: int) -> Path:
    """Write every task's block through a C-ordered subarray file view."""
    blocks = list(_blocks(ntasks, localsize))
    fullsize = 2 * localsize
    sizes = (fullsize, fullsize)
    subsizes = (localsize, localsize)
    with _open_for_write(path) as handle:
        for coords, block in blocks:
            starts = (coords[0] * localsize, coords[1] * localsize)
            displacements = _subarray_displacements(sizes, subsizes, starts)
            flat = block.ravel()
            for start, stop in _runs(displacements):
                handle.seek(int(displacements[start]) * ITEMSIZE)
                handle.write(flat[start:stop].tobytes())
    return Path(path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Write the distributed array to a file from the command line."""
    parser = argparse.ArgumentParser(
        description="Write a block-distributed array to a binary file."
    )
    parser.add_argument("output", nargs="?", help="output file name")
    parser.add_argument("--view", action="store_true", help="write through a file view")
    parser.add_argument("--tasks", type=int, default=REQUIRED_TASKS)
    parser.add_argument("--localsize", type=int, default=LOCALSIZE)
    args = parser.parse_args(argv)

    output = args.output or ("output_fileview.dat" if args.view else "output.dat")
    writer = write_with_view if args.view else write_rows
    try:
        writer(output, args.tasks, args.localsize)
    except ValueError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())