"""Temperature fields, domain decomposition and initial conditions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

DX = 0.01
DY = 0.01

DISC_TEMPERATURE = 5.0
BACKGROUND_TEMPERATURE = 65.0
LEFT_TEMPERATURE = 20.0
RIGHT_TEMPERATURE = 70.0
TOP_TEMPERATURE = 85.0
BOTTOM_TEMPERATURE = 5.0


class DecompositionError(ValueError):
    """Raised when the grid cannot be divided evenly between tasks."""


@dataclass(frozen=True)
class ParallelData:
    """Position of one task in a one-dimensional row decomposition.

    ``nup`` and ``ndown`` are the ranks of the neighbouring tasks, or
    ``None`` where the task lies on the edge of the domain.
    """

    size: int
    rank: int
    nup: Optional[int]
    ndown: Optional[int]


@dataclass(eq=False)
class Field:
    """Local part of a temperature field.

    ``nx`` and ``ny`` are the local interior dimensions; ``data`` also
    holds one ghost layer on every side, so its shape is
    ``(nx + 2, ny + 2)``.
    """

    nx: int
    ny: int
    nx_full: int
    ny_full: int
    dx: float = DX
    dy: float = DY
    data: np.ndarray = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        shape = (self.nx + 2, self.ny + 2)
        if self.data is None:
            self.data = np.zeros(shape, dtype=np.float64)
        else:
            self.data = np.asarray(self.data, dtype=np.float64)
            if self.data.shape != shape:
                raise ValueError(
                    f"data has shape {self.data.shape}, expected {shape}"
                )

    def copy(self) -> Field:
        """Return an independent copy of this field."""
        return Field(
            self.nx,
            self.ny,
            self.nx_full,
            self.ny_full,
            self.dx,
            self.dy,
            self.data.copy(),
        )

    def copy_from(self, other: Field) -> None:
        """Overwrite this field's values with those of ``other``."""
        if (self.nx, self.ny) != (other.nx, other.ny):
            raise ValueError(
                f"field dimensions differ: ({self.nx}, {self.ny}) "
                f"vs ({other.nx}, {other.ny})"
            )
        self.data[...] = other.data

    def inner(self) -> np.ndarray:
        """Return a view of the interior values, without ghost layers."""
        return self.data[1:-1, 1:-1]


def _check_divisible(nx: int, size: int) -> None:
    if size < 1:
        raise ValueError(f"number of tasks must be positive, got {size}")
    if nx % size != 0:
        raise DecompositionError("Cannot divide grid evenly to processors")


def parallel_setup(rank: int, size: int, nx: int, ny: int) -> ParallelData:
    """Describe task ``rank`` of ``size`` tasks sharing an ``nx`` x ``ny`` grid."""
    _check_divisible(nx, size)
    if not 0 <= rank < size:
        raise ValueError(f"rank {rank} out of range for {size} tasks")
    nup = rank - 1 if rank > 0 else None
    ndown = rank + 1 if rank < size - 1 else None
    return ParallelData(size=size, rank=rank, nup=nup, ndown=ndown)


def set_field_dimensions(nx: int, ny: int, parallel: ParallelData) -> Field:
    """Create the local field of a task for a global ``nx`` x ``ny`` grid."""
    _check_divisible(nx, parallel.size)
    return Field(nx=nx // parallel.size, ny=ny, nx_full=nx, ny_full=ny)


def allocate_field(nx: int, ny: int, parallel: ParallelData) -> Field:
    """Create a zero-initialised local field, ghost layers included."""
    return set_field_dimensions(nx, ny, parallel)


def generate_field(nx: int, ny: int, parallel: ParallelData) -> Field:
    """Create the initial local field: a cold disc on a warm background.

    The disc has radius ``nx / 6`` and sits in the centre of the global
    grid. Ghost layers on the outer edges hold fixed boundary temperatures.
    """
    temperature = set_field_dimensions(nx, ny, parallel)
    local_nx = temperature.nx
    radius = temperature.nx_full / 6.0

    rows = np.arange(local_nx + 2)[:, None]
    cols = np.arange(ny + 2)[None, :]
    dx = rows + parallel.rank * local_nx - temperature.nx_full // 2 + 1
    dy = cols - ny // 2 + 1
    inside = dx * dx + dy * dy < radius * radius
    temperature.data[...] = np.where(
        inside, DISC_TEMPERATURE, BACKGROUND_TEMPERATURE
    )

    temperature.data[:, 0] = LEFT_TEMPERATURE
    temperature.data[:, ny + 1] = RIGHT_TEMPERATURE

    if parallel.rank == 0:
        temperature.data[0, :] = TOP_TEMPERATURE
    elif parallel.rank == parallel.size - 1:
        temperature.data[local_nx + 1, :] = BOTTOM_TEMPERATURE

    return temperature