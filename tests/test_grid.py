"""
Grid storage
============

Index arithmetic, seeding calls and the double‑buffer handle swap.
"""
import numpy as np
import pytest

from fluidgen.errors import AllocationFailure, OutOfRange
from fluidgen.simulators import DoubleBuffer, FluidGrid


def test_every_field_has_padded_cube_size(grid8):
    for buf in (grid8.density, grid8.vel_x, grid8.vel_y, grid8.vel_z):
        assert buf.current.size == 10 ** 3
        assert buf.old.size == 10 ** 3


def test_index_layout_x_fastest(grid8):
    assert grid8.index(0, 0, 0) == 0
    assert grid8.index(1, 0, 0) == 1
    assert grid8.index(0, 1, 0) == 10
    assert grid8.index(0, 0, 1) == 100
    # the [z, y, x] view agrees with the flat index
    buf = grid8.density.current
    buf[grid8.index(3, 5, 7)] = 42.0
    assert grid8.padded(buf)[7, 5, 3] == 42.0


def test_cube_index_matches_export_order(grid8):
    n = grid8.n
    seen = [grid8.cube_index(x, y, z)
            for z in range(1, n + 1) for y in range(1, n + 1) for x in range(1, n + 1)]
    assert seen == list(range(n ** 3))


def test_add_density_accumulates_at_padded_cell(grid8):
    grid8.add_density(0, 0, 0, 2.5)
    grid8.add_density(0, 0, 0, 1.5)
    assert grid8.density.current[grid8.index(1, 1, 1)] == 4.0


def test_add_velocity_overwrites(grid8):
    grid8.add_velocity(2, 3, 4, 1.0, 2.0, 3.0)
    grid8.add_velocity(2, 3, 4, -1.0, 0.5, 0.0)
    p = grid8.index(3, 4, 5)
    assert (grid8.vel_x.current[p], grid8.vel_y.current[p], grid8.vel_z.current[p]) == (-1.0, 0.5, 0.0)


@pytest.mark.parametrize("xyz", [(-1, 0, 0), (8, 0, 0), (0, 8, 0), (0, 0, 9)])
def test_seeding_outside_domain_raises(grid8, xyz):
    with pytest.raises(OutOfRange):
        grid8.add_density(*xyz, 1.0)
    with pytest.raises(OutOfRange):
        grid8.add_velocity(*xyz, 0.0, 0.0, 0.0)


def test_bulk_loading_equals_per_cell_seeding(rng):
    n = 4
    dens = rng.uniform(0, 10, size=(n, n, n))
    vel = [rng.normal(size=(n, n, n)) for _ in range(3)]

    bulk = FluidGrid(n)
    bulk.load_density(dens)
    bulk.load_velocity(*vel)

    cellwise = FluidGrid(n)
    cellwise.seed(lambda x, y, z: dens[z, y, x],
                  lambda x, y, z: (vel[0][z, y, x], vel[1][z, y, x], vel[2][z, y, x]))

    for a, b in ((bulk.density, cellwise.density), (bulk.vel_x, cellwise.vel_x),
                 (bulk.vel_y, cellwise.vel_y), (bulk.vel_z, cellwise.vel_z)):
        np.testing.assert_array_equal(a.current, b.current)


def test_bulk_loading_rejects_wrong_shape(grid8):
    with pytest.raises(ValueError):
        grid8.load_density(np.zeros((8, 8, 7)))


def test_oversized_grid_raises_allocation_failure():
    with pytest.raises(AllocationFailure):
        FluidGrid(10**7)


def test_swap_exchanges_handles_without_copying():
    buf = DoubleBuffer(27)
    first, second = buf.current, buf.old
    buf.swap()
    assert buf.current is second and buf.old is first
    buf.swap()
    assert buf.current is first and buf.old is second


def test_non_positive_resolution_is_rejected():
    with pytest.raises(ValueError):
        FluidGrid(0)
