"""Hybrid hello-world and multi-threaded message passing between tasks."""

from __future__ import annotations

import argparse
import os
import queue
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from enum import IntEnum
from typing import Optional

_RECEIVE_TIMEOUT = 30.0


class ThreadLevel(IntEnum):
    """Levels of thread support a message-passing runtime may provide."""

    SINGLE = 0
    FUNNELED = 1
    SERIALIZED = 2
    MULTIPLE = 3


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        raise ValueError(f"number of {name} must be positive, got {value}")


def hello_lines(rank: int, nthreads: int) -> list[str]:
    """Greet from every thread of task ``rank``, in thread order."""
    _check_positive("threads", nthreads)

    def greet(thread: int) -> str:
        return f"I'm thread {thread} in process {rank}"

    with ThreadPoolExecutor(max_workers=nthreads) as pool:
        return list(pool.map(greet, range(nthreads)))


def thread_level_report(provided: int) -> list[str]:
    """Describe the provided thread support level and list all levels."""
    level = ThreadLevel(provided)
    lines = ["", f"Provided thread support level: {int(level)}"]
    lines.extend(f"  {int(lvl)} - MPI_THREAD_{lvl.name}" for lvl in ThreadLevel)
    return lines


def multiple_thread_messages(ntasks: int, nthreads: int) -> list[str]:
    """Send each master thread's id to the same thread of every other task.

    Returns the master's thread count line followed by one line per
    receiving thread, ordered by task and thread.
    """
    _check_positive("tasks", ntasks)
    _check_positive("threads", nthreads)

    mailboxes = {
        (rank, tid): queue.Queue()
        for rank in range(1, ntasks)
        for tid in range(nthreads)
    }

    def send(tid: int) -> None:
        for dest in range(1, ntasks):
            mailboxes[(dest, tid)].put(tid)

    def receive(rank: int, tid: int) -> str:
        msg = mailboxes[(rank, tid)].get(timeout=_RECEIVE_TIMEOUT)
        return f"Rank {rank} thread {tid} received {msg}"

    with ThreadPoolExecutor(max_workers=ntasks * nthreads) as pool:
        receivers = [
            pool.submit(receive, rank, tid)
            for rank in range(1, ntasks)
            for tid in range(nthreads)
        ]
        senders = [pool.submit(send, tid) for tid in range(nthreads)]
        for sender in senders:
            sender.result()
        received = [future.result() for future in receivers]

    return [f"{nthreads} threads in master rank", *received]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print greetings, the thread support report and optional messages."""
    parser = argparse.ArgumentParser(description="Hybrid hello world.")
    parser.add_argument("--rank", type=int, default=0)
    parser.add_argument("--threads", type=int, default=os.cpu_count() or 1)
    parser.add_argument("--provided", type=int, default=int(ThreadLevel.MULTIPLE))
    parser.add_argument(
        "--tasks", type=int, default=0, help="exchange messages between this many tasks"
    )
    args = parser.parse_args(argv)

    try:
        level = ThreadLevel(args.provided)
        if args.tasks:
            if level < ThreadLevel.MULTIPLE:
                print("MPI does not support MPI_THREAD_MULTIPLE")
                return 1
            for line in multiple_thread_messages(args.tasks, args.threads):
                print(line)
            return 0
        for line in hello_lines(args.rank, args.threads):
            print(line)
        if args.rank == 0:
            for line in thread_level_report(level):
                print(line)
    except ValueError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())