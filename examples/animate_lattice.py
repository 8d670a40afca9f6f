"""
Animated lattice.

Drives a 16x16 lattice with the "organic_motion" preset; the twist reverses
whenever the sine rotation pattern changes sign.
"""
from mobiusgrid import Lattice, animate_lattice, preset
import matplotlib.pyplot as plt

L = Lattice(16, 16, params=preset("organic_motion"))

fig, ax, anim = animate_lattice(L, frames=400, interval=20, dt=0.05)

plt.tight_layout()
plt.show()
