"""
Batch evaluation of large lattices.

Runs the vectorized vertex program on the best available backend (CuPy or
JAX when installed, numpy otherwise), checks it against the scalar CPU
pipeline on a small lattice and times one frame of a 256x256 lattice.
"""
import time

import numpy as np
from mobiusgrid import Lattice, get_backend, preset

backend = get_backend("gpu")
print(f"Using backend: {backend.name}")

L = Lattice(16, 16, params=preset("organic_motion"), backend=backend)
L.step(dt=0.5)
diff = np.max(np.abs(L.positions(path="parallel") - L.positions(path="cpu")))
print(f"16x16 max |parallel - cpu| = {diff:.2e}")

L = Lattice(256, 256, params=preset("organic_motion"), backend=backend)
t0 = time.perf_counter()
positions = L.step()
t1 = time.perf_counter()
print(f"256x256 frame: {positions.shape[0]} cells in {t1 - t0:.3f} s")
