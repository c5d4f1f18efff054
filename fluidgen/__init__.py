"""
fluidgen – procedural fluid volume generator
--------------------------------------------

Sub‑packages:
    utils       – config + path helpers
    noise       – Perlin noise and the density / curl seed generators
    simulators  – 3‑D stable‑fluids solver and scene painting
    export      – min/max quantisation and raw volume writer

Public re‑exports
-----------------
>>> from fluidgen import conf, FluidSimulation, write_volume
"""
import logging

from .errors import FluidGenError, AllocationFailure, OutOfRange, IOFailure, ConfigNotFound
from .utils.paths import conf
from .simulators import FluidSimulation
from .export import write_volume

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "conf",
    "FluidSimulation",
    "write_volume",
    "FluidGenError",
    "AllocationFailure",
    "OutOfRange",
    "IOFailure",
    "ConfigNotFound",
]
__version__ = "0.1.0"
