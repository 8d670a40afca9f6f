"""
Rotation-direction patterns.

Steps the rotation modulator through 30 seconds for each pattern and plots
the direction over time.
"""
import numpy as np
from mobiusgrid import RotationModulation, RotationModulator
import matplotlib.pyplot as plt

times = np.arange(0.0, 30.0, 0.01)

fig, axes = plt.subplots(4, 1, sharex=True, figsize=(8, 6))
for ax, pattern in zip(axes, ["kaprekar", "heaviside", "sine", "random"]):
    mod = RotationModulation(interval=2.0, pattern=pattern)
    R = RotationModulator(seed=1)
    directions = [R.update(t, mod) for t in times]
    ax.step(times, directions, where='post')
    ax.set_ylim(-1.5, 1.5)
    ax.set_ylabel(pattern)

axes[-1].set_xlabel('$t$')
plt.tight_layout()
plt.show()
