"""
Simulation drivers.

• fluid_simulator.FluidSimulation   – 3‑D stable‑fluids solver
• scene.set_floor / add_cube_on_floor – solid voxels painted after the run
"""
from .fluid_simulator import FluidSimulation
from .grid import FluidGrid, DoubleBuffer
from .scene import set_floor, add_cube_on_floor

__all__ = ["FluidSimulation", "FluidGrid", "DoubleBuffer",
           "set_floor", "add_cube_on_floor"]
