"""
Noise primitive and seed generators
===================================
"""
import numpy as np
import pytest

from fluidgen.noise import CurlNoiseGenerator, DensityGenerator, PerlinNoise


def test_noise_vanishes_on_lattice_points():
    p = PerlinNoise(-1)
    assert p.noise(3.0, 7.0, 11.0) == 0.0
    assert p.noise(3.0, 7.0, 11.0, unit=True) == 0.5


def test_noise_is_deterministic_per_seed():
    pts = np.random.default_rng(0).uniform(0, 20, size=(3, 50))
    a = PerlinNoise(123).noise(*pts)
    b = PerlinNoise(123).noise(*pts)
    c = PerlinNoise(124).noise(*pts)
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)


def test_noise_scalar_and_array_agree():
    p = PerlinNoise(7)
    xs = np.array([0.3, 1.7, 5.25])
    arr = p.noise(xs, xs * 2, xs * 3)
    assert isinstance(p.noise(0.3, 0.6, 0.9), float)
    for i, x in enumerate(xs):
        assert p.noise(x, x * 2, x * 3) == pytest.approx(arr[i])


def test_noise_range():
    pts = np.random.default_rng(1).uniform(0, 64, size=(3, 5000))
    v = PerlinNoise(-1).noise(*pts)
    assert np.all(np.abs(v) <= 1.5)
    u = PerlinNoise(-1).noise(*pts, unit=True)
    np.testing.assert_allclose(u, (v + 1) / 2)


def test_vector_noise_is_unit_length():
    pts = np.random.default_rng(2).uniform(0.1, 30, size=(3, 200))
    vec = PerlinNoise(5).vector(*pts)
    assert vec.shape == (200, 3)
    norms = np.linalg.norm(vec, axis=-1)
    assert np.all((np.abs(norms - 1) < 1e-9) | (norms == 0))


def test_density_generator_field_matches_point_queries():
    gen = DensityGenerator(6, density_range=50, density_base=100, density_seed=123,
                           height_seed=12345, height_base=0.3, dimension_step=0.1,
                           height_diff=0.1)
    field = gen.field()
    assert field.shape == (6, 6, 6)
    for x, y, z in [(0, 0, 0), (5, 2, 1), (3, 4, 5)]:
        assert gen.density_at(x, y, z) == pytest.approx(field[z, y, x])


def test_density_is_zero_above_surface():
    gen = DensityGenerator(8, 50, 100, 1, 2, height_base=0.35, dimension_step=0.1,
                           height_diff=0.0)
    field = gen.field()
    assert np.all(field[4:] == 0.0)           # z·step ≥ 0.4 > 0.35
    assert np.all(field[:3] > 0.0)


def test_curl_velocity_is_divergence_free_in_the_bulk():
    n = 10
    gen = CurlNoiseGenerator(n, curl_seed=99, height_seed=1, dimension_step=1.0,
                             height_base=1000.0, height_diff=0.0)
    vx, vy, vz = gen.field()
    div = (np.gradient(vx, axis=2) + np.gradient(vy, axis=1) + np.gradient(vz, axis=0))
    scale = np.abs(np.gradient(vx, axis=2)).mean()
    assert np.abs(div[2:-2, 2:-2, 2:-2]).mean() < 0.5 * scale


def test_curl_velocity_stops_at_surface():
    gen = CurlNoiseGenerator(6, 3, 4, dimension_step=0.1, height_base=0.25,
                             height_diff=0.0, strength=2.0)
    vx, vy, vz = gen.field()
    for comp in (vx, vy, vz):
        assert not comp[3:].any()
    assert gen.velocity_at(1, 2, 5) == (0.0, 0.0, 0.0)
    v = gen.velocity_at(1, 2, 1)
    np.testing.assert_allclose(v, (vx[1, 2, 1], vy[1, 2, 1], vz[1, 2, 1]))
