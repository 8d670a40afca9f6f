"""
Batch evaluation backends for mobiusgrid.

Provides a unified interface for evaluating the deformation pipeline over a
whole lattice in one call. Backends:

- ``NumpyBackend``: Vectorized vertex program on numpy (default, always
  available)
- ``MultiprocessingBackend``: the scalar CPU pipeline fanned out over a
  ``multiprocessing.Pool``
- ``CuPyBackend``: vertex program on the GPU via CuPy (requires ``cupy``)
- ``JaxBackend``: vertex program on GPU/TPU via JAX (requires ``jax``)

Usage::

    from mobiusgrid._backend import get_backend

    backend = get_backend("numpy")      # explicit
    backend = get_backend("gpu")        # auto-detect GPU, fallback to numpy
    backend = get_backend("cupy")       # CuPy specifically
    backend = get_backend("jax")        # JAX specifically
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable, Any

import numpy as np

from mobiusgrid._kernel import Uniforms, vertex_program
from mobiusgrid._transform import evaluate


# ---------------------------------------------------------------------------
# Protocol (structural typing interface)
# ---------------------------------------------------------------------------
@runtime_checkable
class BatchBackend(Protocol):
    """Protocol for batch evaluation backends."""

    name: str

    def batch_evaluate(
        self,
        coords: np.ndarray,
        params,
        time: float,
        seed: int = 0,
    ) -> np.ndarray:
        """Deformed positions of N lattice points.

        Parameters
        ----------
        coords : ndarray of shape (N, 2), base coordinates
        params : TransformParameters snapshot of the frame
        time : float, animation time
        seed : int, noise seed

        Returns
        -------
        ndarray of shape (N, 3)
        """
        ...

    def batch_color_scalar(self, z: np.ndarray, amplitude: float) -> np.ndarray:
        """Heights mapped to [0, 1] against the wave amplitude.

        Parameters
        ----------
        z : ndarray of shape (N,)
        amplitude : float

        Returns
        -------
        ndarray of shape (N,)
        """
        ...


def _color_scalar(xp, z, amplitude):
    if amplitude == 0:
        return xp.full(z.shape, 0.5)
    return xp.clip(0.5 * z / amplitude + 0.5, 0.0, 1.0)


# ---------------------------------------------------------------------------
# Numpy backend (always available)
# ---------------------------------------------------------------------------
class NumpyBackend:
    """Vectorized numpy backend. Default for all installations."""

    name = "numpy"

    def batch_evaluate(
        self,
        coords: np.ndarray,
        params,
        time: float,
        seed: int = 0,
    ) -> np.ndarray:
        coords = np.asarray(coords, dtype=float).reshape(-1, 2)
        u = Uniforms.from_parameters(params, time)
        x, y, z = vertex_program(np, coords[:, 0], coords[:, 1], u, seed=seed)
        return np.stack([x, y, z], axis=-1)

    def batch_color_scalar(self, z: np.ndarray, amplitude: float) -> np.ndarray:
        return _color_scalar(np, np.asarray(z, dtype=float), amplitude)


# ---------------------------------------------------------------------------
# Multiprocessing backend (CPU pipeline over a pool)
# ---------------------------------------------------------------------------
class MultiprocessingBackend:
    """CPU-parallel backend using multiprocessing.Pool."""

    name = "multiprocessing"

    def __init__(self, workers: int = 2):
        import multiprocessing as mp
        self.workers = workers
        self.pool = mp.Pool(processes=workers)

    def _get_chunksize(self, n: int) -> int:
        return max(1, n // (4 * self.workers))

    def batch_evaluate(
        self,
        coords: np.ndarray,
        params,
        time: float,
        seed: int = 0,
    ) -> np.ndarray:
        coords = np.asarray(coords, dtype=float).reshape(-1, 2)
        wrapper = _EvaluateWorker(params, time, seed)
        chunksize = self._get_chunksize(coords.shape[0])
        results = self.pool.map(wrapper,
                                [tuple(coords[i]) for i in range(coords.shape[0])],
                                chunksize=chunksize)
        return np.array(results, dtype=float).reshape(-1, 3)

    def batch_color_scalar(self, z: np.ndarray, amplitude: float) -> np.ndarray:
        # Too cheap to be worth shipping to the pool
        return _color_scalar(np, np.asarray(z, dtype=float), amplitude)

    def terminate(self):
        self.pool.terminate()

    def __del__(self):
        try:
            self.pool.terminate()
        except Exception:
            pass

    def __getstate__(self):
        state = self.__dict__.copy()
        state.pop('pool', None)
        return state


class _EvaluateWorker:
    """Pickleable callable for multiprocessing pipeline evaluation."""
    def __init__(self, params, time: float, seed: int):
        self.params = params
        self.time = time
        self.seed = seed

    def __call__(self, xy: tuple) -> tuple:
        return tuple(evaluate(xy[0], xy[1], self.time, self.params,
                              seed=self.seed))


# ---------------------------------------------------------------------------
# CuPy backend (optional GPU)
# ---------------------------------------------------------------------------
class CuPyBackend:
    """GPU backend using CuPy. Requires ``cupy`` to be installed."""

    name = "cupy"

    def __init__(self):
        import cupy  # noqa: F811
        # Raises without a CUDA driver, so auto-detection falls through
        cupy.cuda.runtime.getDeviceCount()
        self.cp = cupy

    def batch_evaluate(
        self,
        coords: np.ndarray,
        params,
        time: float,
        seed: int = 0,
    ) -> np.ndarray:
        cp = self.cp
        coords_gpu = cp.asarray(coords, dtype=cp.float64).reshape(-1, 2)
        u = Uniforms.from_parameters(params, time)
        x, y, z = vertex_program(cp, coords_gpu[:, 0], coords_gpu[:, 1], u,
                                 seed=seed)
        return cp.asnumpy(cp.stack([x, y, z], axis=-1))

    def batch_color_scalar(self, z: np.ndarray, amplitude: float) -> np.ndarray:
        cp = self.cp
        return cp.asnumpy(_color_scalar(cp, cp.asarray(z, dtype=cp.float64),
                                        amplitude))


# ---------------------------------------------------------------------------
# JAX backend (optional GPU/TPU)
# ---------------------------------------------------------------------------
class JaxBackend:
    """GPU/TPU backend using JAX. Requires ``jax`` to be installed."""

    name = "jax"

    def __init__(self):
        import jax
        import jax.numpy as jnp
        self.jax = jax
        self.jnp = jnp

    def batch_evaluate(
        self,
        coords: np.ndarray,
        params,
        time: float,
        seed: int = 0,
    ) -> np.ndarray:
        jnp = self.jnp
        coords_jax = jnp.asarray(np.asarray(coords, dtype=float).reshape(-1, 2))
        u = Uniforms.from_parameters(params, time)
        x, y, z = vertex_program(jnp, coords_jax[:, 0], coords_jax[:, 1], u,
                                 seed=seed)
        return np.asarray(jnp.stack([x, y, z], axis=-1), dtype=float)

    def batch_color_scalar(self, z: np.ndarray, amplitude: float) -> np.ndarray:
        jnp = self.jnp
        return np.asarray(_color_scalar(jnp, jnp.asarray(z), amplitude),
                          dtype=float)


# ---------------------------------------------------------------------------
# Backend registry and auto-detection
# ---------------------------------------------------------------------------
_BACKENDS: dict[str, type] = {
    "numpy": NumpyBackend,
    "multiprocessing": MultiprocessingBackend,
    "cupy": CuPyBackend,
    "jax": JaxBackend,
}


def _detect_gpu_backend() -> BatchBackend:
    """Auto-detect the best available GPU backend, falling back to numpy."""
    try:
        return CuPyBackend()
    except Exception:
        logging.debug("CuPy backend unavailable")
    try:
        return JaxBackend()
    except Exception:
        logging.debug("JAX backend unavailable")
    logging.info("No GPU backend available, using numpy")
    return NumpyBackend()


def get_backend(name: str | None = None, **kwargs: Any) -> BatchBackend:
    """Get a computation backend by name.

    Parameters
    ----------
    name : str or None
        Backend name: ``"numpy"``, ``"multiprocessing"``, ``"cupy"``,
        ``"jax"``, ``"gpu"`` (auto-detect), or ``None`` (numpy default).
    **kwargs
        Passed to the backend constructor (e.g. ``workers=4`` for
        multiprocessing).

    Returns
    -------
    BatchBackend
        An instance satisfying the :class:`BatchBackend` protocol.
    """
    if name is None or name == "numpy":
        return NumpyBackend()
    if name == "gpu":
        return _detect_gpu_backend()
    if name == "multiprocessing":
        return MultiprocessingBackend(**kwargs)
    if name not in _BACKENDS:
        raise ValueError(
            f"Unknown backend {name!r}. Available: {list(_BACKENDS.keys())} or 'gpu'"
        )
    return _BACKENDS[name](**kwargs)
