"""
CPU deformation pipeline.

Every lattice point goes through three stages in a fixed order, each written
as a 4x4 homogeneous matrix acting on the point:

    1. noise displacement    (translation)
    2. Möbius transform      (translation to f(z) in classical mode,
                              Rx Ry Rz rotation in enhanced mode)
    3. Chladni standing wave (translation along z)

so that the final position is ``chladni @ mobius @ noise @ position`` applied
to the origin. The wave term is computed from the base coordinates of the
point, not from the coordinates produced by stages 1 and 2.

All functions here are pure; the only shared input is the noise primitive,
which is stateless.
"""
import math
from collections import namedtuple

import numpy

from mobiusgrid._noise import snoise2, snoise3

Position3D = namedtuple('Position3D', ['x', 'y', 'z'])

# Squared denominator modulus below which the Möbius map is regularized
SINGULAR_EPS = 1e-4
# Magnitude a regularized point is pushed out to
SINGULAR_MAGNITUDE = 1000.0
# Height of the undeformed lattice plane
LATTICE_HEIGHT = 0.0


def _n3(x, y, z, seed):
    return float(snoise3(x, y, z, seed=seed))


def _n2(x, y, seed):
    return float(snoise2(x, y, seed=seed))


# %% Elementary matrices
def translation_matrix(dx, dy, dz):
    m = numpy.eye(4)
    m[0, 3] = dx
    m[1, 3] = dy
    m[2, 3] = dz
    return m


def rotation_x(theta):
    c, s = math.cos(theta), math.sin(theta)
    m = numpy.eye(4)
    m[1, 1] = c
    m[1, 2] = -s
    m[2, 1] = s
    m[2, 2] = c
    return m


def rotation_y(theta):
    c, s = math.cos(theta), math.sin(theta)
    m = numpy.eye(4)
    m[0, 0] = c
    m[0, 2] = s
    m[2, 0] = -s
    m[2, 2] = c
    return m


def rotation_z(theta):
    c, s = math.cos(theta), math.sin(theta)
    m = numpy.eye(4)
    m[0, 0] = c
    m[0, 1] = -s
    m[1, 0] = s
    m[1, 1] = c
    return m


# %% Stage 1: noise displacement
def noise_displacement(x, y, time, scale, seed=0):
    """
    Displacement vector of the noise stage. The three channels sample the
    noise field at decorrelated time phases, the z channel at half weight.
    """
    px, py = x * 0.2, y * 0.2
    dx = _n3(px, py, time * 0.1, seed) * scale
    dy = _n3(px, py, time * 0.15 + 100.0, seed) * scale
    dz = _n3(px, py, time * 0.05 + 200.0, seed) * scale * 0.5
    return dx, dy, dz


def noise_displacement_matrix(x, y, time, scale, seed=0):
    return translation_matrix(*noise_displacement(x, y, time, scale,
                                                  seed=seed))


# %% Stage 2: Möbius
def complex_mul(a, b):
    return (a[0] * b[0] - a[1] * b[1], a[0] * b[1] + a[1] * b[0])


def complex_div(a, b):
    """
    a / b with the singular-denominator rule: when |b|^2 < SINGULAR_EPS the
    numerator is rescaled to SINGULAR_MAGNITUDE keeping its direction, or the
    origin is returned if the numerator is (near) zero too.
    """
    denominator = b[0] * b[0] + b[1] * b[1]
    if denominator < SINGULAR_EPS:
        magnitude = math.sqrt(a[0] * a[0] + a[1] * a[1])
        if magnitude < SINGULAR_EPS:
            return (0.0, 0.0)
        scale = SINGULAR_MAGNITUDE / magnitude
        return (a[0] * scale, a[1] * scale)
    return ((a[0] * b[0] + a[1] * b[1]) / denominator,
            (a[1] * b[0] - a[0] * b[1]) / denominator)


def classical_mobius(x, y, time, params):
    """
    w = (a' z + b) / (c z + d) for z = x + iy, where a' is coefficient a
    rotated by the phase time * animation_speed.

    :return: tuple (Re w, Im w)
    """
    phase = time * params.animation_speed
    a = complex_mul(params.a, (math.cos(phase), math.sin(phase)))
    z = (x, y)
    num = complex_mul(a, z)
    num = (num[0] + params.b[0], num[1] + params.b[1])
    den = complex_mul(params.c, z)
    den = (den[0] + params.d[0], den[1] + params.d[1])
    return complex_div(num, den)


def classical_mobius_matrix(x, y, time, params):
    """Translation taking (x, y) to its Möbius image, height untouched."""
    wx, wy = classical_mobius(x, y, time, params)
    return translation_matrix(wx - x, wy - y, 0.0)


def twist_angles(x, y, z, time, params, seed=0):
    """
    Rotation angles (theta_x, theta_y, theta_z) of the enhanced Möbius twist
    at the point (x, y) with auxiliary height z.
    """
    factor = params.factor
    noise_scale = params.noise_scale
    r = math.sqrt(x * x + y * y)

    noise_factor = _n2(x * 0.2, y * 0.2, seed) * noise_scale
    theta_z = factor * r * (1.0 + 0.5 * math.sin(z * 0.5))
    theta_z += time * 0.1 * (1.0 + noise_factor)

    theta_y = factor * 0.5 * (
        math.sin(r)
        + _n2(x * 0.1 + time * 0.05, y * 0.1, seed) * noise_scale * 0.5
    )
    theta_x = factor * 0.3 * _n2(x * 0.15, time * 0.05, seed) * noise_scale
    return theta_x, theta_y, theta_z


def enhanced_mobius_matrix(x, y, z, time, params, seed=0):
    theta_x, theta_y, theta_z = twist_angles(x, y, z, time, params,
                                             seed=seed)
    return rotation_x(theta_x) @ rotation_y(theta_y) @ rotation_z(theta_z)


def mobius_matrix(x, y, time, params, seed=0):
    if params.use_classical_mobius:
        return classical_mobius_matrix(x, y, time, params)
    return enhanced_mobius_matrix(x, y, LATTICE_HEIGHT, time, params,
                                  seed=seed)


# %% Stage 3: Chladni
def chladni_wave(base_x, base_y, time, params, seed=0):
    """Standing-wave height added to the point, from its base coordinates."""
    base = (math.sin(params.frequency_x * base_x + time)
            * math.sin(params.frequency_y * base_y + time))
    noise = _n3(base_x * 0.1, base_y * 0.1, time * 0.05, seed)
    return params.amplitude * (base + noise * params.noise_scale)


def chladni_matrix(base_x, base_y, time, params, seed=0):
    return translation_matrix(0.0, 0.0,
                              chladni_wave(base_x, base_y, time, params,
                                           seed=seed))


# %% Composition
def combined_matrix(base_x, base_y, time, params, seed=0):
    """
    Full transformation matrix of one lattice point,
    chladni @ mobius @ noise @ position.
    """
    position = translation_matrix(base_x, base_y, 0.0)
    noise = noise_displacement_matrix(base_x, base_y, time,
                                      params.noise_scale, seed=seed)

    # The Möbius stage acts on the displaced point
    displaced = (noise @ position)[:3, 3]
    mobius = mobius_matrix(displaced[0], displaced[1], time, params,
                           seed=seed)
    chladni = chladni_matrix(base_x, base_y, time, params, seed=seed)

    return chladni @ mobius @ noise @ position


def evaluate(base_x, base_y, time, params, seed=0):
    """
    Final 3D position of the lattice point (base_x, base_y) at ``time``.

    Non-finite inputs are not filtered and give non-finite output.

    :param base_x: intrinsic x coordinate of the cell
    :param base_y: intrinsic y coordinate of the cell
    :param time: float, animation time
    :param params: TransformParameters snapshot
    :param seed: int, noise seed
    :return: Position3D
    """
    m = combined_matrix(base_x, base_y, time, params, seed=seed)
    p = m @ numpy.array([0.0, 0.0, 0.0, 1.0])
    return Position3D(float(p[0]), float(p[1]), float(p[2]))


def evaluate_cells(cells, time, params, seed=0):
    """(N, 3) array of evaluate() over a cell sequence, in order."""
    out = numpy.empty((len(cells), 3))

    def position(x, y):
        return evaluate(x, y, time, params, seed=seed)

    for i, c in enumerate(cells):
        out[i] = c.transformed_position(position)
    return out
