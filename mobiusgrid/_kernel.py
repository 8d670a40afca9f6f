"""
Per-vertex deformation program.

The same three-stage pipeline as ``mobiusgrid._transform`` written once over
an array namespace ``xp`` so that it runs for a whole lattice at once on
numpy, cupy or jax.numpy. The Möbius mode is a uniform, fixed for the whole
frame; per-vertex decisions (the singular denominator rule) go through
``xp.where``. Nothing is assigned in place, which keeps it traceable by
jax.jit.

Inputs per frame come from a ``Uniforms`` block built from the same
TransformParameters snapshot the CPU path reads.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from mobiusgrid._noise import snoise2, snoise3
from mobiusgrid._transform import (LATTICE_HEIGHT, SINGULAR_EPS,
                                   SINGULAR_MAGNITUDE)


@dataclass(frozen=True)
class Uniforms:
    """Named per-frame inputs of the vertex program."""

    time: float
    amplitude: float
    frequency_x: float
    frequency_y: float
    use_classical_mobius: bool
    factor: float
    noise_scale: float
    animation_speed: float
    a: Tuple[float, float]
    b: Tuple[float, float]
    c: Tuple[float, float]
    d: Tuple[float, float]

    @classmethod
    def from_parameters(cls, params, time: float) -> "Uniforms":
        """Uniform block of one frame from a TransformParameters snapshot."""
        return cls(
            time=float(time),
            amplitude=params.amplitude,
            frequency_x=params.frequency_x,
            frequency_y=params.frequency_y,
            use_classical_mobius=bool(params.use_classical_mobius),
            factor=params.factor,
            noise_scale=params.noise_scale,
            animation_speed=params.animation_speed,
            a=tuple(params.a),
            b=tuple(params.b),
            c=tuple(params.c),
            d=tuple(params.d),
        )


def _complex_mul(xp, ar, ai, br, bi):
    return ar * br - ai * bi, ar * bi + ai * br


def _complex_div(xp, ar, ai, br, bi):
    den = br * br + bi * bi
    singular = den < SINGULAR_EPS
    safe_den = xp.where(singular, 1.0, den)
    qr = (ar * br + ai * bi) / safe_den
    qi = (ai * br - ar * bi) / safe_den

    magnitude = xp.sqrt(ar * ar + ai * ai)
    vanishing = magnitude < SINGULAR_EPS
    scale = SINGULAR_MAGNITUDE / xp.where(vanishing, 1.0, magnitude)
    rr = xp.where(vanishing, 0.0, ar * scale)
    ri = xp.where(vanishing, 0.0, ai * scale)

    return xp.where(singular, rr, qr), xp.where(singular, ri, qi)


def _noise_displacement(xp, x, y, time, scale, seed):
    px, py = x * 0.2, y * 0.2
    dx = snoise3(px, py, time * 0.1 + 0.0 * x, xp=xp, seed=seed) * scale
    dy = snoise3(px, py, time * 0.15 + 100.0 + 0.0 * x, xp=xp,
                 seed=seed) * scale
    dz = snoise3(px, py, time * 0.05 + 200.0 + 0.0 * x, xp=xp,
                 seed=seed) * scale * 0.5
    return dx, dy, dz


def _classical_mobius(xp, x, y, u):
    phase = u.time * u.animation_speed
    ar, ai = _complex_mul(xp, u.a[0], u.a[1], np.cos(phase), np.sin(phase))
    nr, ni = _complex_mul(xp, ar, ai, x, y)
    nr, ni = nr + u.b[0], ni + u.b[1]
    dr, di = _complex_mul(xp, u.c[0], u.c[1], x, y)
    dr, di = dr + u.d[0], di + u.d[1]
    return _complex_div(xp, nr, ni, dr, di)


def _enhanced_mobius(xp, x, y, z, u, seed):
    r = xp.sqrt(x * x + y * y)
    h = LATTICE_HEIGHT

    noise_factor = snoise2(x * 0.2, y * 0.2, xp=xp, seed=seed) * u.noise_scale
    theta_z = u.factor * r * (1.0 + 0.5 * np.sin(h * 0.5))
    theta_z = theta_z + u.time * 0.1 * (1.0 + noise_factor)

    theta_y = u.factor * 0.5 * (
        xp.sin(r)
        + snoise2(x * 0.1 + u.time * 0.05, y * 0.1, xp=xp, seed=seed)
        * u.noise_scale * 0.5
    )
    theta_x = (u.factor * 0.3 * u.noise_scale
               * snoise2(x * 0.15, u.time * 0.05 + 0.0 * x, xp=xp, seed=seed))

    # Rz
    cz, sz = xp.cos(theta_z), xp.sin(theta_z)
    x1 = cz * x - sz * y
    y1 = sz * x + cz * y
    z1 = z
    # Ry
    cy, sy = xp.cos(theta_y), xp.sin(theta_y)
    x2 = cy * x1 + sy * z1
    y2 = y1
    z2 = -sy * x1 + cy * z1
    # Rx
    cx, sx = xp.cos(theta_x), xp.sin(theta_x)
    x3 = x2
    y3 = cx * y2 - sx * z2
    z3 = sx * y2 + cx * z2
    return x3, y3, z3


def _chladni_wave(xp, base_x, base_y, u, seed):
    base = (xp.sin(u.frequency_x * base_x + u.time)
            * xp.sin(u.frequency_y * base_y + u.time))
    noise = snoise3(base_x * 0.1, base_y * 0.1, u.time * 0.05 + 0.0 * base_x,
                    xp=xp, seed=seed)
    return u.amplitude * (base + noise * u.noise_scale)


def vertex_program(xp, base_x, base_y, u: Uniforms, seed=0):
    """
    Deformed positions of a batch of lattice points.

    :param xp: array namespace (numpy, cupy, jax.numpy)
    :param base_x: array of shape (N,), base x coordinates
    :param base_y: array of shape (N,), base y coordinates
    :param u: Uniforms of the frame
    :param seed: int, noise seed
    :return: tuple (x, y, z) of arrays of shape (N,)
    """
    # 1. Noise displacement
    dx, dy, dz = _noise_displacement(xp, base_x, base_y, u.time,
                                     u.noise_scale, seed)
    x = base_x + dx
    y = base_y + dy
    z = 0.0 * base_x + dz

    # 2. Möbius
    if u.use_classical_mobius:
        mx, my = _classical_mobius(xp, x, y, u)
        mz = z
    else:
        mx, my, mz = _enhanced_mobius(xp, x, y, z, u, seed)

    # 3. Chladni, from the base coordinates
    wave = _chladni_wave(xp, base_x, base_y, u, seed)
    return mx, my, mz + wave


def evaluate_batch(base_xy, params, time, xp=np, seed=0):
    """
    Run the vertex program over an (N, 2) array of base coordinates.

    :return: ndarray of shape (N, 3) in the namespace xp
    """
    u = Uniforms.from_parameters(params, time)
    base_xy = xp.asarray(base_xy, dtype=float)
    x, y, z = vertex_program(xp, base_xy[:, 0], base_xy[:, 1], u, seed=seed)
    return xp.stack([x, y, z], axis=-1)
