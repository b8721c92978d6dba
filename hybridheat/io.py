"""Reading initial temperature fields and gathering distributed fields."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from typing import Union

import numpy as np

from hybridheat.field import Field, ParallelData, set_field_dimensions

_HEADER = re.compile(r"#\s*([+-]?\d+)\s+([+-]?\d+)")


class InputFormatError(ValueError):
    """Raised when an input field file cannot be parsed."""


def read_header(line: str) -> tuple[int, int]:
    """Parse a header line of the form ``# nx ny`` into ``(nx, ny)``."""
    match = _HEADER.match(line)
    if match is None:
        raise InputFormatError("Error while reading the input file!")
    nx, ny = int(match.group(1)), int(match.group(2))
    if nx <= 0 or ny <= 0:
        raise InputFormatError(
            f"field dimensions must be positive, got {nx} x {ny}"
        )
    return nx, ny


def read_field(path: Union[str, os.PathLike], parallel: ParallelData) -> Field:
    """Read the local part of an initial field for task ``parallel.rank``.

    The file starts with a ``# nx ny`` header followed by ``nx * ny``
    whitespace-separated values in row-major order. Ghost layers are
    filled by copying the adjacent interior values.
    """
    with open(path, encoding="ascii") as handle:
        header = handle.readline()
        body = handle.read()

    nx, ny = read_header(header)
    temperature = set_field_dimensions(nx, ny, parallel)

    tokens = body.split()
    count = nx * ny
    if len(tokens) < count:
        raise InputFormatError(
            f"expected {count} values, found {len(tokens)}"
        )
    try:
        values = np.array(tokens[:count], dtype=np.float64)
    except ValueError as exc:
        raise InputFormatError(f"invalid value in input file: {exc}") from exc
    full = values.reshape(nx, ny)

    local_nx = temperature.nx
    start = parallel.rank * local_nx
    data = temperature.data
    data[1:-1, 1:-1] = full[start:start + local_nx]

    data[1:-1, 0] = data[1:-1, 1]
    data[1:-1, ny + 1] = data[1:-1, ny]
    data[0, :] = data[1, :]
    data[local_nx + 1, :] = data[local_nx, :]

    return temperature


def gather_field(fields: Sequence[Field]) -> np.ndarray:
    """Join the interiors of all tasks' fields into one global array."""
    if not fields:
        raise ValueError("no fields to gather")
    return np.concatenate([temperature.inner() for temperature in fields], axis=0)