"""Halo exchange and time stepping for the heat equation."""

from __future__ import annotations

from collections.abc import Sequence

from hybridheat.field import Field, ParallelData


def exchange(fields: Sequence[Field], parallels: Sequence[ParallelData]) -> None:
    """Fill the ghost rows of every task's field from its neighbours.

    ``fields[r]`` and ``parallels[r]`` describe task ``r``. Each task's
    first interior row goes to the bottom ghost row of the task above,
    and its last interior row to the top ghost row of the task below.
    Edges without a neighbour keep their ghost rows.
    """
    if len(fields) != len(parallels):
        raise ValueError("fields and parallels must have the same length")
    for temperature, parallel in zip(fields, parallels):
        if parallel.ndown is not None:
            below = fields[parallel.ndown]
            temperature.data[temperature.nx + 1] = below.data[1]
        if parallel.nup is not None:
            above = fields[parallel.nup]
            temperature.data[0] = above.data[above.nx]


def evolve(curr: Field, prev: Field, a: float, dt: float) -> None:
    """Advance ``prev`` one time step into ``curr`` with a five-point stencil.

    Only interior points are updated; ghost layers of ``curr`` are left
    untouched.
    """
    if (curr.nx, curr.ny) != (prev.nx, prev.ny):
        raise ValueError("fields must have the same dimensions")
    dx2 = prev.dx * prev.dx
    dy2 = prev.dy * prev.dy
    p = prev.data
    centre = p[1:-1, 1:-1]
    laplacian = (p[2:, 1:-1] - 2.0 * centre + p[:-2, 1:-1]) / dx2 + (
        p[1:-1, 2:] - 2.0 * centre + p[1:-1, :-2]
    ) / dy2
    curr.data[1:-1, 1:-1] = centre + a * dt * laplacian


def stable_time_step(dx: float, dy: float, a: float) -> float:
    """Return the largest stable explicit time step."""
    dx2 = dx * dx
    dy2 = dy * dy
    return dx2 * dy2 / (2.0 * a * (dx2 + dy2))