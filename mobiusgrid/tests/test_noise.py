"""Tests for the simplex noise primitive."""
import numpy
import numpy.testing as npt

from mobiusgrid._noise import snoise2, snoise3


def _make_test_points(n=200, seed=42, scale=20.0):
    rng = numpy.random.default_rng(seed)
    return (rng.random((n, 3)) - 0.5) * scale


class TestSimplexNoise:
    def test_deterministic(self):
        assert snoise3(1.3, 2.7, 0.5) == snoise3(1.3, 2.7, 0.5)

    def test_bounded(self):
        p = _make_test_points(n=2000)
        n = snoise3(p[:, 0], p[:, 1], p[:, 2])
        assert numpy.all(numpy.abs(n) <= 1.1)
        assert numpy.std(n) > 0.05

    def test_array_matches_scalar(self):
        p = _make_test_points(n=25)
        batch = snoise3(p[:, 0], p[:, 1], p[:, 2])
        single = [snoise3(*row) for row in p]
        npt.assert_allclose(batch, single, rtol=1e-12, atol=1e-15)

    def test_broadcast_scalar_axis(self):
        p = _make_test_points(n=10)
        batch = snoise3(p[:, 0], p[:, 1], 3.5)
        single = [snoise3(x, y, 3.5) for x, y in p[:, :2]]
        npt.assert_allclose(batch, single, rtol=1e-12, atol=1e-15)

    def test_seed_stable(self):
        p = _make_test_points(n=50)
        a = snoise3(p[:, 0], p[:, 1], p[:, 2], seed=17)
        b = snoise3(p[:, 0], p[:, 1], p[:, 2], seed=17)
        c = snoise3(p[:, 0], p[:, 1], p[:, 2], seed=0)
        npt.assert_array_equal(a, b)
        assert not numpy.allclose(a, c)

    def test_continuous(self):
        """Nearby inputs give nearby values."""
        p = _make_test_points(n=100)
        n0 = snoise3(p[:, 0], p[:, 1], p[:, 2])
        n1 = snoise3(p[:, 0] + 1e-6, p[:, 1], p[:, 2])
        assert numpy.max(numpy.abs(n1 - n0)) < 1e-4

    def test_2d_is_z_slice(self):
        p = _make_test_points(n=30)
        npt.assert_array_equal(snoise2(p[:, 0], p[:, 1]),
                               snoise3(p[:, 0], p[:, 1], 0.0 * p[:, 0]))

    def test_nan_propagates(self):
        assert numpy.isnan(snoise3(numpy.nan, 0.0, 0.0))
