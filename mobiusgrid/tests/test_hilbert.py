"""Tests for Hilbert curve ranking."""
import math

import numpy
import pytest

from mobiusgrid._hilbert import (
    hilbert_coordinates,
    hilbert_index,
    hilbert_order,
    is_power_of_two,
)


class TestIsPowerOfTwo:
    @pytest.mark.parametrize("n", [1, 2, 4, 8, 64, 1024])
    def test_powers(self, n):
        assert is_power_of_two(n)

    @pytest.mark.parametrize("n", [0, -4, 3, 5, 6, 12, 100])
    def test_non_powers(self, n):
        assert not is_power_of_two(n)


class TestHilbertIndex:
    def test_2x2_curve(self):
        """The first-order curve visits (0,0), (0,1), (1,1), (1,0)."""
        assert hilbert_index(2, 0, 0) == 0
        assert hilbert_index(2, 0, 1) == 1
        assert hilbert_index(2, 1, 1) == 2
        assert hilbert_index(2, 1, 0) == 3

    @pytest.mark.parametrize("n", [1, 2, 4, 8, 16])
    def test_bijective(self, n):
        """Ranks over an n x n grid are exactly 0 .. n**2 - 1."""
        ranks = sorted(hilbert_index(n, x, y)
                       for x in range(n) for y in range(n))
        assert ranks == list(range(n * n))

    def test_locality_8x8(self):
        """Consecutive ranks on an 8x8 grid are at most sqrt(2) apart."""
        n = 8
        by_rank = {hilbert_index(n, x, y): (x, y)
                   for x in range(n) for y in range(n)}
        for k in range(n * n - 1):
            (x0, y0), (x1, y1) = by_rank[k], by_rank[k + 1]
            assert math.hypot(x1 - x0, y1 - y0) <= math.sqrt(2)

    def test_starts_and_ends_on_bottom_edge(self):
        n = 16
        assert hilbert_index(n, 0, 0) == 0
        assert hilbert_index(n, n - 1, 0) == n * n - 1

    def test_non_power_of_two_terminates(self):
        """Any non-negative side length returns an int."""
        for n in (0, 3, 5, 7, 12):
            for x in range(max(n, 1)):
                assert isinstance(hilbert_index(n, x, 0), int)

    def test_degenerate_sides(self):
        assert hilbert_index(0, 0, 0) == 0
        assert hilbert_index(1, 0, 0) == 0


class TestHilbertCoordinates:
    @pytest.mark.parametrize("n", [2, 4, 8, 32])
    def test_inverts_index(self, n):
        for k in range(n * n):
            x, y = hilbert_coordinates(n, k)
            assert hilbert_index(n, x, y) == k

    def test_order_array(self):
        order = hilbert_order(4)
        assert order.shape == (16, 2)
        steps = numpy.abs(numpy.diff(order, axis=0)).sum(axis=1)
        numpy.testing.assert_array_equal(steps, 1)
