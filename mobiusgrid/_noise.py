"""
Seed-stable 2D/3D simplex noise.

Gradient noise after Ian McEwan and Stefan Gustavson (Ashima Arts, MIT
License). The lattice hash is the mod-289 permutation polynomial, so there is
no permutation table and the same code runs on scalars, numpy arrays and any
array namespace with the numpy API (cupy, jax.numpy). Every function takes
the namespace as ``xp``; nothing is mutated in place, which keeps the noise
pure and safe to call from several processes at once.
"""
import numpy

_C_X = 1.0 / 6.0
_C_Y = 1.0 / 3.0
# n_ * D.wyz - D.xzx with n_ = 1/7
_NS_X = 2.0 / 7.0
_NS_Y = 0.5 / 7.0 - 1.0
_NS_Z = 1.0 / 7.0


def _mod289(x, xp):
    return x - xp.floor(x * (1.0 / 289.0)) * 289.0


def _permute(x, xp):
    return _mod289(((x * 34.0) + 1.0) * x, xp)


def _taylor_inv_sqrt(r):
    return 1.79284291400159 - 0.85373472095314 * r


def _step(edge, x, xp):
    return xp.where(x >= edge, 1.0, 0.0)


def snoise3(x, y, z, xp=numpy, seed=0):
    """
    3D simplex noise in roughly [-1, 1].

    :param x, y, z: scalars or broadcastable arrays of the namespace xp
    :param xp: array namespace (numpy, cupy, jax.numpy)
    :param seed: int, shifts the permutation hash; equal seeds give equal
                 noise fields
    :return: noise value(s) with the broadcast shape of the inputs
    """
    seed = float(seed % 289)

    # First corner
    s = (x + y + z) * _C_Y
    i = xp.floor(x + s)
    j = xp.floor(y + s)
    k = xp.floor(z + s)
    t = (i + j + k) * _C_X
    x0 = x - i + t
    y0 = y - j + t
    z0 = z - k + t

    # Other corners
    gx = _step(y0, x0, xp)
    gy = _step(z0, y0, xp)
    gz = _step(x0, z0, xp)
    lx = 1.0 - gx
    ly = 1.0 - gy
    lz = 1.0 - gz
    i1 = (xp.minimum(gx, lz), xp.minimum(gy, lx), xp.minimum(gz, ly))
    i2 = (xp.maximum(gx, lz), xp.maximum(gy, lx), xp.maximum(gz, ly))

    offsets = (
        (0.0, 0.0, 0.0),
        i1,
        i2,
        (1.0, 1.0, 1.0),
    )
    corners = (
        (x0, y0, z0),
        (x0 - i1[0] + _C_X, y0 - i1[1] + _C_X, z0 - i1[2] + _C_X),
        (x0 - i2[0] + _C_Y, y0 - i2[1] + _C_Y, z0 - i2[2] + _C_Y),
        (x0 - 0.5, y0 - 0.5, z0 - 0.5),
    )

    i = _mod289(i, xp)
    j = _mod289(j, xp)
    k = _mod289(k, xp)

    total = 0.0
    for (oi, oj, ok), (cx, cy, cz) in zip(offsets, corners):
        # Permutations
        p = _permute(k + ok + seed, xp)
        p = _permute(p + j + oj, xp)
        p = _permute(p + i + oi, xp)

        # Gradients: 7x7 points over a square, mapped onto an octahedron
        jj = p - 49.0 * xp.floor(p * _NS_Z * _NS_Z)
        x_ = xp.floor(jj * _NS_Z)
        y_ = xp.floor(jj - 7.0 * x_)
        gxr = x_ * _NS_X + _NS_Y
        gyr = y_ * _NS_X + _NS_Y
        h = 1.0 - xp.abs(gxr) - xp.abs(gyr)

        sh = -_step(h, 0.0, xp)
        ax = gxr + (xp.floor(gxr) * 2.0 + 1.0) * sh
        ay = gyr + (xp.floor(gyr) * 2.0 + 1.0) * sh

        norm = _taylor_inv_sqrt(ax * ax + ay * ay + h * h)

        m = xp.maximum(0.6 - (cx * cx + cy * cy + cz * cz), 0.0)
        m = m * m
        total = total + m * m * norm * (ax * cx + ay * cy + h * cz)

    return 42.0 * total


def snoise2(x, y, xp=numpy, seed=0):
    """2D simplex noise, the z = 0 slice of snoise3."""
    return snoise3(x, y, 0.0 * x, xp=xp, seed=seed)
