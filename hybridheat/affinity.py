"""CPU affinity reports and a simple timed compute kernel."""

from __future__ import annotations

import argparse
import os
import socket
import sys
import time
from collections.abc import Iterable, Sequence
from typing import Optional

import numpy as np

LEN = 10_000_000


def format_mask(hostname: str, rank: int, thread: int, cores: Iterable[int]) -> str:
    """Format one affinity line: host, task, thread, core count and cores."""
    cores = list(cores)
    header = (
        f"{hostname}: task {rank:4d}, thread {thread:2d}, "
        f"ccount {len(cores):2d}, cores: "
    )
    return header + "".join(f"{core:2d} " for core in cores)


def current_cores() -> list[int]:
    """Return the sorted CPU numbers this process may run on."""
    getaffinity = getattr(os, "sched_getaffinity", None)
    if getaffinity is not None:
        return sorted(getaffinity(0))
    return list(range(os.cpu_count() or 1))


def mask_report(rank: int, nthreads: int) -> list[str]:
    """Return one affinity line for each of ``nthreads`` threads of ``rank``."""
    if nthreads < 1:
        raise ValueError(f"number of threads must be positive, got {nthreads}")
    hostname = socket.gethostname()
    cores = current_cores()
    return [format_mask(hostname, rank, thread, cores) for thread in range(nthreads)]


def compute_kernel(rank: int, length: int) -> np.ndarray:
    """Evaluate ``sqrt((rank + 1) * i) * 12.4 * i ** 2.3`` for ``i < length``."""
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    i = np.arange(length, dtype=np.float64)
    values = (rank + 1) * i
    return np.sqrt(values) * 12.4 * np.power(i, 2.3)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print an affinity report or time the compute kernel."""
    parser = argparse.ArgumentParser(description="Affinity report and timed kernel.")
    parser.add_argument("--rank", type=int, default=0)
    parser.add_argument("--length", type=int, default=LEN)
    parser.add_argument("--mask", action="store_true", help="print CPU masks")
    parser.add_argument("--threads", type=int, default=1)
    args = parser.parse_args(argv)

    try:
        if args.mask:
            for line in mask_report(args.rank, args.threads):
                print(line)
        else:
            start = time.perf_counter()
            compute_kernel(args.rank, args.length)
            print(f"Time: {time.perf_counter() - start:.5f}")
    except ValueError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())