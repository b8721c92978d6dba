"""Command-line driver for the two-dimensional heat equation solver."""

from __future__ import annotations

import re
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from hybridheat.core import evolve, exchange, stable_time_step
from hybridheat.field import (
    DecompositionError,
    Field,
    ParallelData,
    generate_field,
    parallel_setup,
)
from hybridheat.io import InputFormatError, gather_field, read_field, read_header

DEFAULT_ROWS = 2000
DEFAULT_COLS = 2000
DEFAULT_NSTEPS = 500
DEFAULT_DIFFUSION = 0.5
DEFAULT_IMAGE_INTERVAL = 500

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Config:
    """Run settings; ``input_file`` replaces the generated initial field."""

    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    nsteps: int = DEFAULT_NSTEPS
    input_file: Optional[str] = None
    a: float = DEFAULT_DIFFUSION
    image_interval: int = DEFAULT_IMAGE_INTERVAL
    snapshots: bool = False


@dataclass
class Result:
    """Outcome of a run: the final global field and summary values."""

    field: np.ndarray
    reference: Optional[float]
    elapsed: float
    nsteps: int
    snapshots: dict[int, np.ndarray] = field(default_factory=dict)


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_args(argv: Sequence[str]) -> Config:
    """Build a configuration from command-line arguments.

    No arguments uses the defaults; one names an input file; two name an
    input file and the number of steps; three give rows, columns and steps.
    """
    args = list(argv)
    if not args:
        return Config()
    if len(args) == 1:
        return Config(input_file=args[0])
    if len(args) == 2:
        return Config(input_file=args[0], nsteps=_atoi(args[1]))
    if len(args) == 3:
        return Config(
            rows=_atoi(args[0]), cols=_atoi(args[1]), nsteps=_atoi(args[2])
        )
    raise ValueError("Unsupported number of command line arguments")


def initialize(
    config: Config, size: int
) -> tuple[list[Field], list[Field], list[ParallelData]]:
    """Create current and previous fields for every one of ``size`` tasks."""
    if config.input_file is not None:
        with open(config.input_file, encoding="ascii") as handle:
            nx, ny = read_header(handle.readline())
        parallels = [parallel_setup(rank, size, nx, ny) for rank in range(size)]
        current = [read_field(config.input_file, p) for p in parallels]
    else:
        nx, ny = config.rows, config.cols
        parallels = [parallel_setup(rank, size, nx, ny) for rank in range(size)]
        current = [generate_field(nx, ny, p) for p in parallels]
    previous = [temperature.copy() for temperature in current]
    return current, previous, parallels


def run(config: Config, size: int = 1) -> Result:
    """Evolve the field for ``config.nsteps`` steps split over ``size`` tasks."""
    current, previous, parallels = initialize(config, size)

    snapshots: dict[int, np.ndarray] = {}
    if config.snapshots:
        snapshots[0] = gather_field(current)

    dt = stable_time_step(current[0].dx, current[0].dy, config.a)

    start = time.perf_counter()
    for iteration in range(1, config.nsteps + 1):
        exchange(previous, parallels)
        for curr, prev in zip(current, previous):
            evolve(curr, prev, config.a, dt)
        if config.snapshots and iteration % config.image_interval == 0:
            snapshots[iteration] = gather_field(current)
        current, previous = previous, current
    elapsed = time.perf_counter() - start

    first = previous[0].data
    reference = float(first[5, 5]) if first.shape[0] > 5 and first.shape[1] > 5 else None

    return Result(
        field=gather_field(previous),
        reference=reference,
        elapsed=elapsed,
        nsteps=config.nsteps,
        snapshots=snapshots,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the solver from the command line and print a summary."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        config = parse_args(argv)
    except ValueError as exc:
        print(exc)
        return 1
    try:
        result = run(config)
    except InputFormatError as exc:
        print(f"Error while reading the input file! ({exc})", file=sys.stderr)
        return 1
    except DecompositionError as exc:
        print(exc)
        return 2
    except OSError as exc:
        print(f"Cannot open input file: {exc}", file=sys.stderr)
        return 1

    print(f"Iteration took {result.elapsed:.3f} seconds.")
    if result.reference is not None:
        print(f"Reference value at 5,5: {result.reference:f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())