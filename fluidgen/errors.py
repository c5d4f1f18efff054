"""
Error taxonomy shared by every stage of the pipeline.

All of them are fatal: the generator is a batch job, so callers are
expected to let these propagate up to the CLI, which reports and exits.
"""
from __future__ import annotations


class FluidGenError(RuntimeError):
    """Base class for every error raised by fluidgen."""


class AllocationFailure(FluidGenError, MemoryError):
    """Field buffers for the requested resolution cannot be allocated."""


class OutOfRange(FluidGenError, IndexError):
    """Seeding coordinates fall outside the active domain ``[0, N)``."""


class IOFailure(FluidGenError, OSError):
    """The output volume could not be written."""


class ConfigNotFound(FluidGenError, FileNotFoundError):
    """An explicitly requested config file does not exist."""
