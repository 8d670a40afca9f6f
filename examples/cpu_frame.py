"""
Single frame of the CPU pipeline.

Builds an 8x8 Hilbert-ordered lattice, evaluates every cell through the
noise -> Möbius -> Chladni matrix chain at t = 1 and plots the result with
the Hilbert path drawn through the cells.
"""
from mobiusgrid import GridBuilder, TransformParameters, evaluate, plot_frame
from mobiusgrid._transform import evaluate_cells
import matplotlib.pyplot as plt

G = GridBuilder()
cells = G.build((8, 8))
print(f"8x8 lattice: {len(cells)} cells, first {cells[:4]}")

params = TransformParameters(amplitude=0.8, noise_scale=0.3)
p = evaluate(3, 5, 1.0, params)
print(f"Cell (3, 5) at t = 1: {p}")

positions = evaluate_cells(cells, 1.0, params)
fig, ax = plot_frame(positions, connect_cells=True)
ax.set_title("CPU pipeline, t = 1")
plt.show()
