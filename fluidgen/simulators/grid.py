"""
Grid storage for the fluid solver.

Fields are flat ``float64`` buffers of ``(N+2)³`` cells.  Callers address
cells in one of two systems:

* voxel coordinates – 0‑based, ``0 ≤ x, y, z < N`` (seeding API)
* padded coordinates – 1‑based active domain inside the ghost shell

`padded()` returns a ``[z, y, x]`` view of a buffer, `active()` the view
without the ghost shell; both share memory with the flat buffer.
"""
from __future__ import annotations

import logging

import numpy as np

from ..errors import AllocationFailure, OutOfRange

_log = logging.getLogger(__name__)


def _alloc(cells: int) -> np.ndarray:
    try:
        return np.zeros(cells, dtype=np.float64)
    except (MemoryError, ValueError) as exc:
        raise AllocationFailure(f"cannot allocate {cells} cells: {exc}") from exc


class DoubleBuffer:
    """Two buffers whose current/old roles are exchanged by `swap()`."""

    __slots__ = ("_pair", "_front")

    def __init__(self, cells: int):
        self._pair = (_alloc(cells), _alloc(cells))
        self._front = 0

    @property
    def current(self) -> np.ndarray:
        return self._pair[self._front]

    @property
    def old(self) -> np.ndarray:
        return self._pair[1 - self._front]

    def swap(self) -> None:
        self._front ^= 1


class FluidGrid:
    """Owns every field buffer of one simulation."""

    def __init__(self, n: int):
        if int(n) < 1:
            raise ValueError(f"grid resolution must be positive, got {n!r}")
        self.n = int(n)
        self.size = self.n + 2
        cells = self.size ** 3
        _log.debug("Allocating 8 fields of %d cells (N=%d)", cells, self.n)

        self.density = DoubleBuffer(cells)   # old role holds `s`
        self.vel_x = DoubleBuffer(cells)
        self.vel_y = DoubleBuffer(cells)
        self.vel_z = DoubleBuffer(cells)

    # ── index arithmetic ────────────────────────────────────────────────
    def index(self, x: int, y: int, z: int) -> int:
        return x + y * self.size + z * self.size * self.size

    def cube_index(self, x: int, y: int, z: int) -> int:
        """Padded coordinates → zero‑based index into the N³ export order."""
        n = self.n
        return (x - 1) + (y - 1) * n + (z - 1) * n * n

    def padded(self, buf: np.ndarray) -> np.ndarray:
        return buf.reshape(self.size, self.size, self.size)

    def active(self, buf: np.ndarray) -> np.ndarray:
        return self.padded(buf)[1:-1, 1:-1, 1:-1]

    # ── seeding ─────────────────────────────────────────────────────────
    def _cell(self, x: int, y: int, z: int) -> int:
        n = self.n
        if not (0 <= x < n and 0 <= y < n and 0 <= z < n):
            raise OutOfRange(f"voxel ({x}, {y}, {z}) outside [0, {n})³")
        return self.index(x + 1, y + 1, z + 1)

    def add_density(self, x: int, y: int, z: int, amount: float) -> None:
        self.density.current[self._cell(x, y, z)] += amount

    def add_velocity(self, x: int, y: int, z: int,
                     vx: float, vy: float, vz: float) -> None:
        """Set (not add) the velocity of one voxel."""
        p = self._cell(x, y, z)
        self.vel_x.current[p] = vx
        self.vel_y.current[p] = vy
        self.vel_z.current[p] = vz

    def _check_shape(self, arr: np.ndarray) -> np.ndarray:
        arr = np.asarray(arr, dtype=np.float64)
        shape = (self.n,) * 3
        if arr.shape != shape:
            raise ValueError(f"seed array has shape {arr.shape}, expected {shape}")
        return arr

    def load_density(self, field: np.ndarray) -> None:
        """Bulk `add_density` for a ``[z, y, x]`` array of the active domain."""
        self.active(self.density.current)[...] += self._check_shape(field)

    def load_velocity(self, vx: np.ndarray, vy: np.ndarray, vz: np.ndarray) -> None:
        """Bulk `add_velocity` for three ``[z, y, x]`` component arrays."""
        for buf, comp in ((self.vel_x, vx), (self.vel_y, vy), (self.vel_z, vz)):
            self.active(buf.current)[...] = self._check_shape(comp)

    def seed(self, density_at=None, velocity_at=None) -> None:
        """Call the per‑voxel seeding functions once for every active cell."""
        n = self.n
        for z in range(n):
            for y in range(n):
                for x in range(n):
                    if density_at is not None:
                        self.add_density(x, y, z, density_at(x, y, z))
                    if velocity_at is not None:
                        self.add_velocity(x, y, z, *velocity_at(x, y, z))
