"""
Post‑simulation scene painting.

Heights and positions are in *padded* grid coordinates (z is up); callers
convert world units with the configured ``dimension_step``.  Painted
regions are clipped to the active domain.
"""
from __future__ import annotations

import logging
import math

_log = logging.getLogger(__name__)


def _stop(limit: float, n: int) -> int:
    # first integer index not below `limit`, capped past the active domain
    return max(1, min(math.ceil(limit), n + 1))


def set_floor(grid, height: float, value: float) -> None:
    """Overwrite density with *value* for every active cell with ``z < height``."""
    dens = grid.padded(grid.density.current)
    n = grid.n
    dens[1:_stop(height, n), 1:n + 1, 1:n + 1] = value


def add_cube_on_floor(grid, size: float, floor_height: float,
                      pos_x: float, pos_y: float, value: float) -> None:
    """Overwrite a solid box of *value* standing on the floor at (pos_x, pos_y)."""
    n = grid.n
    z0, y0, x0 = (max(1, int(v)) for v in (floor_height, pos_y, pos_x))
    z1 = _stop(floor_height + size, n)
    y1 = _stop(pos_y + size, n)
    x1 = _stop(pos_x + size, n)
    if z0 >= z1 or y0 >= y1 or x0 >= x1:
        _log.warning("Cube at (%.1f, %.1f) lies outside the %d³ domain – skipped.",
                     pos_x, pos_y, n)
        return
    grid.padded(grid.density.current)[z0:z1, y0:y1, x0:x1] = value
