"""
Raw volume export
=================

Turns the finished density field into an ``N³`` byte volume:

    value ≤ 1            ➜   0   (empty)
    value ≥ solid_value  ➜ 255   (floor, cube)
    otherwise            ➜ ⌊255 · (value − min) / (max − min)⌋

``min`` / ``max`` come from `compute_density_range` over the fluid cells
only.  The file has no header; voxels run x fastest, then y, then z.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import numpy as np

from ..errors import IOFailure

_log = logging.getLogger(__name__)

EMPTY_LIMIT = 1.0
FALLBACK_RANGE = (0.0, 1.0)


def compute_density_range(density: np.ndarray, exclude_value: float) -> tuple[float, float]:
    """
    (min, max) of the densities strictly between `EMPTY_LIMIT` and
    *exclude_value*; `FALLBACK_RANGE` when no cell qualifies.
    """
    d = np.asarray(density)
    fluid = d[(d > EMPTY_LIMIT) & (d < exclude_value)]
    if fluid.size == 0:
        _log.warning("No fluid voxels in (%.1f, %.1f) – using range %s.",
                     EMPTY_LIMIT, exclude_value, FALLBACK_RANGE)
        return FALLBACK_RANGE
    return float(fluid.min()), float(fluid.max())


def quantize(value, vmin: float, vmax: float, solid_value: float):
    """Map density to 0..255; works on scalars and on arrays (→ uint8)."""
    v = np.asarray(value, dtype=np.float64)
    interval = vmax - vmin
    if interval > 0:
        scaled = np.floor(255.0 * (v - vmin) / interval)
    else:
        scaled = np.zeros_like(v)
    out = np.clip(scaled, 0, 255)
    out = np.where(v <= EMPTY_LIMIT, 0, np.where(v >= solid_value, 255, out))
    out = out.astype(np.uint8)
    return int(out) if out.ndim == 0 else out


def volume_bytes(grid, solid_value: float) -> bytes:
    """Quantised active domain of *grid*'s density, in export order."""
    dens = grid.active(grid.density.current)
    vmin, vmax = compute_density_range(dens, solid_value)
    _log.info("Density range for quantisation: [%.3f, %.3f]", vmin, vmax)
    return np.ascontiguousarray(quantize(dens, vmin, vmax, solid_value)).tobytes()


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_volume(path: str | Path, data: bytes) -> Path:
    """
    Write *data* atomically: a temporary file next to *path* is renamed
    over it, so a failed run never leaves a truncated volume behind.
    """
    path = Path(path)
    tmp = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=path.parent, prefix=f".{path.name}.",
                                         suffix=".part", delete=False) as fh:
            tmp = Path(fh.name)
            fh.write(data)
        # temp files are created 0600; give the volume the usual umask mode
        os.chmod(tmp, 0o666 & ~_umask())
        os.replace(tmp, path)
    except OSError as exc:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        raise IOFailure(f"cannot write volume to {path}: {exc}") from exc
    _log.info("Wrote %d bytes → %s", len(data), path)
    return path


def export_density(sim, path: str | Path, solid_value: float) -> Path:
    return write_volume(path, volume_bytes(sim.grid, solid_value))
