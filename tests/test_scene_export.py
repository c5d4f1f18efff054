"""
Scene painting and raw export
=============================
"""
import os
import stat

import numpy as np
import pytest

from fluidgen.errors import IOFailure
from fluidgen.export import compute_density_range, quantize, volume_bytes, write_volume
from fluidgen.simulators import FluidGrid, add_cube_on_floor, set_floor


def test_floor_fills_cells_below_height(grid8):
    set_floor(grid8, 3.5, 255.0)
    d = grid8.padded(grid8.density.current)
    assert np.all(d[1:4, 1:-1, 1:-1] == 255.0)
    assert not d[4:].any()
    assert not d[0].any()          # ghost shell untouched


def test_cube_stands_on_floor(grid8):
    add_cube_on_floor(grid8, 2.0, 3.0, 4.0, 5.0, 9.0)
    d = grid8.padded(grid8.density.current)
    assert np.all(d[3:5, 5:7, 4:6] == 9.0)
    assert d.sum() == 9.0 * 8


def test_cube_is_clipped_to_domain(grid8):
    add_cube_on_floor(grid8, 20.0, 7.0, 6.0, 6.0, 1.0)
    d = grid8.padded(grid8.density.current)
    assert d.sum() == 2 * 3 * 3
    assert not d[9].any()


def test_density_range_skips_empty_and_solid():
    d = np.array([0.5, 1.0, 3.0, 7.0, 255.0, 300.0])
    assert compute_density_range(d, 255.0) == (3.0, 7.0)


def test_density_range_falls_back_when_nothing_qualifies():
    assert compute_density_range(np.array([0.0, 1.0, 255.0]), 255.0) == (0.0, 1.0)


def test_quantize_endpoints():
    assert quantize(1.0, 10.0, 20.0, 255.0) == 0
    assert quantize(0.2, 10.0, 20.0, 255.0) == 0
    assert quantize(255.0, 10.0, 20.0, 255.0) == 255
    assert quantize(20.0, 10.0, 20.0, 255.0) == 255
    assert quantize(10.0, 10.0, 20.0, 255.0) == 0
    assert quantize(15.0, 10.0, 20.0, 255.0) == 127


def test_quantize_is_monotone():
    values = np.linspace(0.0, 300.0, 2001)
    q = quantize(values, 5.0, 200.0, 255.0)
    assert q.dtype == np.uint8
    assert np.all(np.diff(q.astype(int)) >= 0)


def test_quantize_zero_width_range():
    assert quantize(5.0, 5.0, 5.0, 255.0) == 0


def test_volume_bytes_are_x_fastest():
    g = FluidGrid(3)
    d = g.active(g.density.current)
    d[...] = 50.0
    d[0, 0, 1] = 100.0             # x=1, y=0, z=0
    d[2, 0, 0] = 255.0             # z=2 – solid
    raw = volume_bytes(g, 255.0)
    assert len(raw) == 27
    assert raw[1] == 255 and raw[0] == 0
    assert raw[g.cube_index(1, 1, 3)] == 255


def test_write_volume_replaces_atomically(tmp_path):
    out = tmp_path / "vol" / "fluid.raw"
    write_volume(out, b"\x00\x01")
    write_volume(out, b"\x02\x03\x04")
    assert out.read_bytes() == b"\x02\x03\x04"
    assert [p.name for p in out.parent.iterdir()] == ["fluid.raw"]


def test_write_volume_failure_leaves_nothing(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    with pytest.raises(IOFailure):
        write_volume(blocker / "fluid.raw", b"\x00")
    assert [p.name for p in tmp_path.iterdir()] == ["file"]


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_write_volume_follows_umask(tmp_path):
    old = os.umask(0o022)
    try:
        out = write_volume(tmp_path / "fluid.raw", b"\x00")
    finally:
        os.umask(old)
    assert stat.S_IMODE(out.stat().st_mode) == 0o644
