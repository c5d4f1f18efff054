"""
Improved Perlin noise, vectorised with numpy.

Lattice coordinates are truncated toward zero and wrapped to 256; the
fractional part is eased with ``6t⁵ − 15t⁴ + 10t³``.  Every function
accepts scalars or numpy arrays of matching shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

# Ken Perlin's reference permutation
_P = np.array([
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
], dtype=np.int64)

# (x, y, z) coefficients for hash & 15; rows 12..15 are not the textbook ones
_GRAD = np.array([
    (1, 1, 0), (-1, 1, 0), (1, -1, 0), (-1, -1, 0),
    (1, 0, 1), (-1, 0, 1), (1, 0, -1), (-1, 0, -1),
    (0, 1, 1), (0, -1, 1), (0, 1, -1), (0, -1, -1),
    (1, 1, 0), (0, -1, 1), (-1, 1, 0), (0, -1, -1),
], dtype=np.float64)

UNSEEDED = -1


def fade(t):
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(a, b, t):
    return a + t * (b - a)


def _grad(h, x, y, z):
    g = _GRAD[h & 15]
    return g[..., 0] * x + g[..., 1] * y + g[..., 2] * z


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v, axis=-1, keepdims=True)
    return np.divide(v, norm, out=np.zeros_like(v), where=norm > 0)


@dataclass
class PerlinNoise:
    """
    seed == -1 uses the reference permutation; any other seed draws a
    512‑entry hash table from a seeded generator.
    """
    seed: int = UNSEEDED
    permutation: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.seed == UNSEEDED:
            self.permutation = np.concatenate([_P, _P])
        else:
            rng = np.random.default_rng(self.seed)
            self.permutation = rng.integers(0, 256, size=512, dtype=np.int64)

    def _octant(self, x, y, z):
        """Eased offsets and the two lower/upper‑z face interpolations."""
        x, y, z = (np.asarray(c, dtype=np.float64) for c in (x, y, z))
        xt, yt, zt = np.trunc(x), np.trunc(y), np.trunc(z)
        xi = xt.astype(np.int64) & 255
        yi = yt.astype(np.int64) & 255
        zi = zt.astype(np.int64) & 255
        xf, yf, zf = x - xt, y - yt, z - zt
        u, v, w = fade(xf), fade(yf), fade(zf)

        p = self.permutation
        a, b = p[xi], p[xi + 1]
        aa, ab = p[a + yi], p[a + yi + 1]
        ba, bb = p[b + yi], p[b + yi + 1]

        x1 = lerp(_grad(p[aa + zi], xf, yf, zf), _grad(p[ba + zi], xf - 1, yf, zf), u)
        x2 = lerp(_grad(p[ab + zi], xf, yf - 1, zf), _grad(p[bb + zi], xf - 1, yf - 1, zf), u)
        x3 = lerp(_grad(p[aa + zi + 1], xf, yf, zf - 1), _grad(p[ba + zi + 1], xf - 1, yf, zf - 1), u)
        x4 = lerp(_grad(p[ab + zi + 1], xf, yf - 1, zf - 1), _grad(p[bb + zi + 1], xf - 1, yf - 1, zf - 1), u)
        return x1, x2, x3, x4, v, w

    def noise(self, x, y, z, unit: bool = False):
        """Scalar noise in [-1, 1], or [0, 1] with ``unit=True``."""
        x1, x2, x3, x4, v, w = self._octant(x, y, z)
        out = lerp(lerp(x1, x2, v), lerp(x3, x4, v), w)
        if unit:
            out = (out + 1) / 2
        return float(out) if np.ndim(out) == 0 else out

    def vector(self, x, y, z) -> np.ndarray:
        """Unit vector ``(x1, x2, y1)`` from the lower‑z face; shape ``(..., 3)``."""
        x1, x2, _, _, v, _ = self._octant(x, y, z)
        return _normalize(np.stack([x1, x2, lerp(x1, x2, v)], axis=-1))
