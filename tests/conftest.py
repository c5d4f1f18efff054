"""
Shared fixtures: small grids keep numba compilation the dominant cost.
"""
import numpy as np
import pytest

from fluidgen.simulators import FluidGrid, FluidSimulation


@pytest.fixture
def rng():
    return np.random.default_rng(2024)


@pytest.fixture
def grid8():
    return FluidGrid(8)


@pytest.fixture
def sim8():
    return FluidSimulation(8, diffusion=0.01, viscosity=0.0, dt=0.1)
