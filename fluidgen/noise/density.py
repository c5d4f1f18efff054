"""
Density seed generator
----------------------

Fills the cube with a noisy body of fluid below a noisy surface:

    surface(x, y) = height_base + height_diff · perlin_h(x, y)
    density       = density_base + density_range · perlin_d(x, y, z)   below
                    0                                                   above

All lengths are in world units (voxel index × ``dimension_step``); the
surface noise shares ``height_seed`` with the curl generator so the
velocity field ends where the fluid does.
"""
from __future__ import annotations

import logging

import numpy as np

from .perlin import PerlinNoise

_log = logging.getLogger(__name__)

#: noise lattice cells per world unit
HEIGHT_FREQUENCY = 0.05
DENSITY_FREQUENCY = 0.1


class Surface:
    """Height of the fluid surface above each (x, y) column."""

    def __init__(self, height_seed: int, height_base: float, height_diff: float,
                 dimension_step: float):
        self.noise = PerlinNoise(height_seed)
        self.base = float(height_base)
        self.diff = float(height_diff)
        self.step = float(dimension_step)

    def __call__(self, x, y):
        f = self.step * HEIGHT_FREQUENCY
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        return self.base + self.diff * self.noise.noise(x * f, y * f, 0.0)

    def grid(self, n: int) -> np.ndarray:
        """``[y, x]`` height map for an n × n domain."""
        y, x = np.mgrid[0:n, 0:n]
        return self(x, y)


class DensityGenerator:

    def __init__(self, n: int, density_range: float, density_base: float,
                 density_seed: int, height_seed: int, height_base: float,
                 dimension_step: float, height_diff: float):
        self.n = int(n)
        self.range = float(density_range)
        self.base = float(density_base)
        self.step = float(dimension_step)
        self.noise = PerlinNoise(density_seed)
        self.surface = Surface(height_seed, height_base, height_diff, dimension_step)

    @classmethod
    def from_config(cls, conf) -> "DensityGenerator":
        s = conf.seeding
        return cls(conf.grid["size"], s["density_range"], s["density_base"],
                   s["density_seed"], s["height_seed"], s["height_base"],
                   conf.grid["dimension_step"], s["height_diff"])

    def _density(self, x, y, z, height):
        f = self.step * DENSITY_FREQUENCY
        value = self.base + self.range * self.noise.noise(x * f, y * f, z * f)
        return np.where(z * self.step < height, value, 0.0)

    def density_at(self, x: int, y: int, z: int) -> float:
        return float(self._density(float(x), float(y), float(z), self.surface(x, y)))

    def field(self) -> np.ndarray:
        """Whole ``[z, y, x]`` density block, built one z‑slice at a time."""
        n = self.n
        _log.info("Calculating density field (%d³)", n)
        heights = self.surface.grid(n)
        y, x = np.mgrid[0:n, 0:n].astype(np.float64)
        out = np.empty((n, n, n), dtype=np.float64)
        for z in range(n):
            out[z] = self._density(x, y, float(z), heights)
        return out
