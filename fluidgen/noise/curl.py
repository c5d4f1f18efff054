"""
Curl‑noise velocity seed
------------------------

The velocity is the curl of a Perlin vector potential ψ, which makes it
divergence‑free before the solver ever touches it:

    u = strength · ∇ × ψ
      = strength · (∂ψz/∂y − ∂ψy/∂z,  ∂ψx/∂z − ∂ψz/∂x,  ∂ψy/∂x − ∂ψx/∂y)

Derivatives are central differences in world units.  Cells above the
fluid surface get zero velocity.
"""
from __future__ import annotations

import logging

import numpy as np

from .perlin import PerlinNoise
from .density import Surface

_log = logging.getLogger(__name__)

CURL_FREQUENCY = 0.1
# lattice offsets that decorrelate the three potential channels
CHANNEL_OFFSETS = ((1.0, 1.0, 1.0), (31.4, 47.2, 19.7), (73.9, 11.3, 57.6))


class CurlNoiseGenerator:

    def __init__(self, n: int, curl_seed: int, height_seed: int,
                 dimension_step: float, height_base: float, height_diff: float,
                 strength: float = 1.0):
        self.n = int(n)
        self.step = float(dimension_step)
        self.strength = float(strength)
        self.eps = 0.5 * self.step
        self.noise = PerlinNoise(curl_seed)
        self.surface = Surface(height_seed, height_base, height_diff, dimension_step)

    @classmethod
    def from_config(cls, conf) -> "CurlNoiseGenerator":
        s = conf.seeding
        return cls(conf.grid["size"], s["curl_seed"], s["height_seed"],
                   conf.grid["dimension_step"], s["height_base"], s["height_diff"],
                   s.get("curl_strength", 1.0))

    def potential(self, wx, wy, wz) -> np.ndarray:
        """ψ at world coordinates; shape ``(..., 3)``."""
        f = CURL_FREQUENCY
        return np.stack([self.noise.noise(wx * f + ox, wy * f + oy, wz * f + oz)
                         for ox, oy, oz in CHANNEL_OFFSETS], axis=-1)

    def _curl(self, x, y, z, height):
        wx, wy, wz = x * self.step, y * self.step, z * self.step
        e = self.eps
        ddx = (self.potential(wx + e, wy, wz) - self.potential(wx - e, wy, wz)) / (2 * e)
        ddy = (self.potential(wx, wy + e, wz) - self.potential(wx, wy - e, wz)) / (2 * e)
        ddz = (self.potential(wx, wy, wz + e) - self.potential(wx, wy, wz - e)) / (2 * e)
        vel = self.strength * np.stack([
            ddy[..., 2] - ddz[..., 1],
            ddz[..., 0] - ddx[..., 2],
            ddx[..., 1] - ddy[..., 0],
        ], axis=-1)
        inside = np.asarray(wz < height)[..., None]
        return np.where(inside, vel, 0.0)

    def velocity_at(self, x: int, y: int, z: int) -> tuple[float, float, float]:
        v = self._curl(float(x), float(y), float(z), self.surface(x, y))
        return float(v[0]), float(v[1]), float(v[2])

    def field(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """``[z, y, x]`` blocks of the three velocity components."""
        n = self.n
        _log.info("Calculating potential field (%d³)", n)
        heights = self.surface.grid(n)
        y, x = np.mgrid[0:n, 0:n].astype(np.float64)
        vx, vy, vz = (np.empty((n, n, n), dtype=np.float64) for _ in range(3))
        for z in range(n):
            v = self._curl(x, y, float(z), heights)
            vx[z], vy[z], vz[z] = v[..., 0], v[..., 1], v[..., 2]
        return vx, vy, vz
