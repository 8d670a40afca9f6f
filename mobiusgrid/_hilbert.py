"""
Hilbert curve ranks for square power-of-two lattices.

Neighbouring ranks map to neighbouring lattice coordinates, so sorting cells
by rank keeps spatially close cells close in memory and in draw order.
"""
import numpy


def is_power_of_two(n):
    """True for n = 1, 2, 4, 8, ..."""
    return n >= 1 and (n & (n - 1)) == 0


def hilbert_index(n, x, y):
    """
    Rank of the lattice coordinate (x, y) along the Hilbert curve filling an
    n x n grid.

    :param n: int, side length of the grid (a power of two for a bijective
              ranking; any non-negative value terminates)
    :param x: int, column, 0 <= x < n
    :param y: int, row, 0 <= y < n
    :return: int, rank in [0, n**2)
    """
    index = 0
    s = n >> 1
    while s > 0:
        rx = 1 if (x & s) > 0 else 0
        ry = 1 if (y & s) > 0 else 0
        index += s * s * ((3 * rx) ^ ry)
        # Rotate the quadrant
        if ry == 0:
            if rx == 1:
                x = n - 1 - x
                y = n - 1 - y
            x, y = y, x
        s >>= 1

    return index


def hilbert_coordinates(n, index):
    """
    Inverse of hilbert_index: the (x, y) coordinate holding the given rank on
    an n x n grid (n a power of two).
    """
    x = y = 0
    t = index
    s = 1
    while s < n:
        rx = 1 & (t // 2)
        ry = 1 & (t ^ rx)
        if ry == 0:
            if rx == 1:
                x = s - 1 - x
                y = s - 1 - y
            x, y = y, x
        x += s * rx
        y += s * ry
        t //= 4
        s <<= 1

    return x, y


def hilbert_order(n):
    """Array of shape (n**2, 2) with the lattice coordinates in curve order."""
    return numpy.array([hilbert_coordinates(n, i) for i in range(n * n)],
                       dtype=int).reshape(-1, 2)
