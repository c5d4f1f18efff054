"""
Fluid Simulator
===============

Stam‑style stable fluids on a padded N³ grid.  One call to
`FluidSimulation.step()` performs, in this exact order:

    velocity   diffuse X, Y, Z ➜ project ➜ advect X, Y, Z ➜ project
    density    diffuse ➜ advect

During projection the *old* velocity X / Y buffers are borrowed as the
pressure and divergence scratch fields.
"""
from __future__ import annotations

import logging
import sys

from .grid import FluidGrid
from . import kernels as K

_log = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 8


class FluidSimulation:

    def __init__(self, n: int, diffusion: float, viscosity: float, dt: float,
                 iterations: int = DEFAULT_ITERATIONS):
        self.grid = FluidGrid(n)
        self.n = self.grid.n
        self.diff = float(diffusion)
        self.visc = float(viscosity)
        self.dt = float(dt)
        self.iter = int(iterations)
        self.steps_done = 0

    @classmethod
    def from_config(cls, conf) -> "FluidSimulation":
        solver = conf.solver
        return cls(conf.grid["size"], solver["diffusion"], solver["viscosity"],
                   solver["dt"], solver.get("iterations", DEFAULT_ITERATIONS))

    # seeding pass‑throughs
    def add_density(self, x, y, z, amount):
        self.grid.add_density(x, y, z, amount)

    def add_velocity(self, x, y, z, vx, vy, vz):
        self.grid.add_velocity(x, y, z, vx, vy, vz)

    @property
    def density(self):
        return self.grid.density.current

    # ── solver stages ───────────────────────────────────────────────────
    def diffuse(self, kind, dst, src, rate):
        K.diffuse(kind, dst, src, rate, self.dt, self.iter, self.n)

    def advect(self, kind, dst, src, vel_x, vel_y, vel_z):
        K.advect(kind, dst, src, vel_x, vel_y, vel_z, self.dt, self.n)

    def project(self, vel_x, vel_y, vel_z, p, div):
        K.project(vel_x, vel_y, vel_z, p, div, self.iter, self.n)

    def step(self) -> None:
        g = self.grid
        vx, vy, vz, d = g.vel_x, g.vel_y, g.vel_z, g.density

        _log.debug("Velocity solver – diffusion")
        vx.swap()
        self.diffuse(K.VELOCITY_X, vx.current, vx.old, self.visc)
        vy.swap()
        self.diffuse(K.VELOCITY_Y, vy.current, vy.old, self.visc)
        vz.swap()
        self.diffuse(K.VELOCITY_Z, vz.current, vz.old, self.visc)
        self.project(vx.current, vy.current, vz.current, vx.old, vy.old)
        vx.swap()
        vy.swap()
        vz.swap()

        _log.debug("Velocity solver – advection")
        self.advect(K.VELOCITY_X, vx.current, vx.old, vx.old, vy.old, vz.old)
        self.advect(K.VELOCITY_Y, vy.current, vy.old, vx.old, vy.old, vz.old)
        self.advect(K.VELOCITY_Z, vz.current, vz.old, vx.old, vy.old, vz.old)
        self.project(vx.current, vy.current, vz.current, vx.old, vy.old)

        _log.debug("Density solver")
        d.swap()
        self.diffuse(K.DENSITY, d.current, d.old, self.diff)
        d.swap()
        self.advect(K.DENSITY, d.current, d.old, vx.current, vy.current, vz.current)
        self.steps_done += 1

    def run(self, steps: int) -> None:
        for i in range(steps):
            _log.info("Started simulation of step %d/%d", i + 1, steps)
            self.step()
        _log.info("Finished with fluid simulation")

    def dump(self, stream=None) -> None:
        """Print density and velocity of every active cell, one row per line."""
        stream = stream or sys.stdout
        g = self.grid
        d = g.active(g.density.current)
        x, y, z = (g.active(b.current) for b in (g.vel_x, g.vel_y, g.vel_z))
        for k in range(self.n):
            for j in range(self.n):
                stream.write("".join(
                    f"d: {d[k, j, i]:.2f} x: {x[k, j, i]:.2f} "
                    f"y: {y[k, j, i]:.2f} z: {z[k, j, i]:.2f} |\t"
                    for i in range(self.n)))
                stream.write("\n")
