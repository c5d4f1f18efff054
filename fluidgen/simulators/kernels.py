"""
Stable‑fluids kernels on flat, padded 3‑D buffers
=================================================

Every buffer holds ``(N+2)³`` cells laid out as

    index(x, y, z) = x + y·(N+2) + z·(N+2)²

with the one‑cell ghost shell at coordinate 0 and N+1 on each axis.

Kernels are compiled with numba (``nopython``) and walk the grid
sequentially, x innermost, so the Gauss‑Seidel sweeps read values written
earlier in the same sweep.  Field *kinds* select the wall condition:

    DENSITY     0   copy (zero gradient)
    VELOCITY_X  1   negate on the x faces
    VELOCITY_Y  2   negate on the y faces
    VELOCITY_Z  3   negate on the z faces
"""
from __future__ import annotations

import numpy as np
from numba import njit

DENSITY, VELOCITY_X, VELOCITY_Y, VELOCITY_Z = 0, 1, 2, 3

# 6‑point stencil in 3‑D.
NEIGHBOURS = 6
# corner ghost = mean of its three neighbours
CORNER_WEIGHT = 1.0 / 3.0


@njit(inline="always")
def ix(x, y, z, size):
    return x + y * size + z * size * size


@njit
def set_bnd(b, x, n):
    """Rewrite the ghost shell of *x* from its adjacent active layer."""
    s = n + 2
    sx = -1.0 if b == VELOCITY_X else 1.0
    sy = -1.0 if b == VELOCITY_Y else 1.0
    sz = -1.0 if b == VELOCITY_Z else 1.0

    for j in range(1, n + 1):
        for i in range(1, n + 1):
            x[ix(i, j, 0, s)] = sz * x[ix(i, j, 1, s)]
            x[ix(i, j, n + 1, s)] = sz * x[ix(i, j, n, s)]
    for k in range(1, n + 1):
        for i in range(1, n + 1):
            x[ix(i, 0, k, s)] = sy * x[ix(i, 1, k, s)]
            x[ix(i, n + 1, k, s)] = sy * x[ix(i, n, k, s)]
    for k in range(1, n + 1):
        for j in range(1, n + 1):
            x[ix(0, j, k, s)] = sx * x[ix(1, j, k, s)]
            x[ix(n + 1, j, k, s)] = sx * x[ix(n, j, k, s)]

    m = n + 1
    w = CORNER_WEIGHT
    x[ix(0, 0, 0, s)] = w * (x[ix(1, 0, 0, s)] + x[ix(0, 1, 0, s)] + x[ix(0, 0, 1, s)])
    x[ix(0, m, 0, s)] = w * (x[ix(1, m, 0, s)] + x[ix(0, n, 0, s)] + x[ix(0, m, 1, s)])
    x[ix(0, 0, m, s)] = w * (x[ix(1, 0, m, s)] + x[ix(0, 1, m, s)] + x[ix(0, 0, n, s)])
    x[ix(0, m, m, s)] = w * (x[ix(1, m, m, s)] + x[ix(0, n, m, s)] + x[ix(0, m, n, s)])
    x[ix(m, 0, 0, s)] = w * (x[ix(n, 0, 0, s)] + x[ix(m, 1, 0, s)] + x[ix(m, 0, 1, s)])
    x[ix(m, m, 0, s)] = w * (x[ix(n, m, 0, s)] + x[ix(m, n, 0, s)] + x[ix(m, m, 1, s)])
    x[ix(m, 0, m, s)] = w * (x[ix(n, 0, m, s)] + x[ix(m, 1, m, s)] + x[ix(m, 0, n, s)])
    x[ix(m, m, m, s)] = w * (x[ix(n, m, m, s)] + x[ix(m, n, m, s)] + x[ix(m, m, n, s)])


@njit
def lin_solve(b, x, x0, a, c, iterations, n):
    """Gauss‑Seidel relaxation of ``x = (x0 + a·Σneighbours(x)) / c``."""
    s = n + 2
    ss = s * s
    inv_c = 1.0 / c
    for _ in range(iterations):
        for k in range(1, n + 1):
            for j in range(1, n + 1):
                for i in range(1, n + 1):
                    p = ix(i, j, k, s)
                    x[p] = (x0[p] + a * (x[p + 1] + x[p - 1]
                                         + x[p - s] + x[p + s]
                                         + x[p - ss] + x[p + ss])) * inv_c
        set_bnd(b, x, n)


@njit
def diffuse(b, x, x0, rate, dt, iterations, n):
    a = dt * rate * n * n
    lin_solve(b, x, x0, a, 1.0 + NEIGHBOURS * a, iterations, n)


@njit
def _advect(b, d, d0, vel_x, vel_y, vel_z, dt, n):
    s = n + 2
    dt0 = dt * n
    hi = n + 0.5
    for k in range(1, n + 1):
        for j in range(1, n + 1):
            for i in range(1, n + 1):
                p = ix(i, j, k, s)
                x = i - dt0 * vel_x[p]
                y = j - dt0 * vel_y[p]
                z = k - dt0 * vel_z[p]

                x = min(max(x, 0.5), hi)
                y = min(max(y, 0.5), hi)
                z = min(max(z, 0.5), hi)
                i0 = int(x)
                j0 = int(y)
                k0 = int(z)
                i1 = i0 + 1
                j1 = j0 + 1
                k1 = k0 + 1

                s1 = x - i0
                s0 = 1.0 - s1
                t1 = y - j0
                t0 = 1.0 - t1
                u1 = z - k0
                u0 = 1.0 - u1

                d[p] = (
                    s0 * (t0 * (u0 * d0[ix(i0, j0, k0, s)] + u1 * d0[ix(i0, j0, k1, s)])
                          + t1 * (u0 * d0[ix(i0, j1, k0, s)] + u1 * d0[ix(i0, j1, k1, s)]))
                    + s1 * (t0 * (u0 * d0[ix(i1, j0, k0, s)] + u1 * d0[ix(i1, j0, k1, s)])
                            + t1 * (u0 * d0[ix(i1, j1, k0, s)] + u1 * d0[ix(i1, j1, k1, s)]))
                )
    set_bnd(b, d, n)


def advect(b, d, d0, vel_x, vel_y, vel_z, dt, n):
    """Semi‑Lagrangian transport of *d0* into *d* along the given velocity."""
    if d is d0:
        raise ValueError("advect needs distinct source and destination buffers")
    _advect(b, d, d0, vel_x, vel_y, vel_z, dt, n)


@njit
def compute_divergence(vel_x, vel_y, vel_z, div, n):
    """Scaled central‑difference divergence, ``-½·h·∇·u`` with ``h = 1/N``."""
    s = n + 2
    ss = s * s
    h = 1.0 / n
    for k in range(1, n + 1):
        for j in range(1, n + 1):
            for i in range(1, n + 1):
                p = ix(i, j, k, s)
                div[p] = -0.5 * h * (
                    vel_x[p + 1] - vel_x[p - 1]
                    + vel_y[p + s] - vel_y[p - s]
                    + vel_z[p + ss] - vel_z[p - ss])


@njit
def project(vel_x, vel_y, vel_z, p, div, iterations, n):
    """Remove the divergent part of the velocity field (in place)."""
    s = n + 2
    ss = s * s
    h = 1.0 / n

    compute_divergence(vel_x, vel_y, vel_z, div, n)
    for k in range(1, n + 1):
        for j in range(1, n + 1):
            for i in range(1, n + 1):
                p[ix(i, j, k, s)] = 0.0
    set_bnd(DENSITY, div, n)
    set_bnd(DENSITY, p, n)
    lin_solve(DENSITY, p, div, 1.0, 1.0 * NEIGHBOURS, iterations, n)

    for k in range(1, n + 1):
        for j in range(1, n + 1):
            for i in range(1, n + 1):
                q = ix(i, j, k, s)
                vel_x[q] -= 0.5 * (p[q + 1] - p[q - 1]) / h
                vel_y[q] -= 0.5 * (p[q + s] - p[q - s]) / h
                vel_z[q] -= 0.5 * (p[q + ss] - p[q - ss]) / h
    set_bnd(VELOCITY_X, vel_x, n)
    set_bnd(VELOCITY_Y, vel_y, n)
    set_bnd(VELOCITY_Z, vel_z, n)


def mean_abs_divergence(vel_x, vel_y, vel_z, n) -> float:
    """Mean |∇·u| over the active domain (grid units)."""
    div = np.zeros_like(vel_x)
    compute_divergence(vel_x, vel_y, vel_z, div, n)
    s = n + 2
    active = div.reshape(s, s, s)[1:-1, 1:-1, 1:-1]
    return float(np.abs(active).mean() * n)
