"""
Deformable Hilbert-ordered lattices.

Usage::

    from mobiusgrid import Lattice, preset

    L = Lattice(8, 8, params=preset("organic_motion"))
    for _ in range(100):
        positions = L.step()          # (64, 3) array, Hilbert ordered
    colors = L.colors(positions)
"""
from ._backend import get_backend
from ._cell import Cell, CellCache
from ._frame import Lattice
from ._grid import GridBuilder, GridConfiguration
from ._hilbert import (
    hilbert_coordinates,
    hilbert_index,
    hilbert_order,
    is_power_of_two,
)
from ._kernel import Uniforms, evaluate_batch, vertex_program
from ._noise import snoise2, snoise3
from ._params import (
    MobiusCoefficients,
    RotationModulation,
    RotationPattern,
    TransformParameters,
    load_parameters,
    preset,
    save_parameters,
)
from ._plotting import animate_lattice, color_scalar, plot_frame
from ._rotation import RotationModulator, RotationRuntimeState
from ._transform import Position3D, evaluate

__all__ = [
    "Cell",
    "CellCache",
    "GridBuilder",
    "GridConfiguration",
    "Lattice",
    "MobiusCoefficients",
    "Position3D",
    "RotationModulation",
    "RotationModulator",
    "RotationPattern",
    "RotationRuntimeState",
    "TransformParameters",
    "Uniforms",
    "animate_lattice",
    "color_scalar",
    "evaluate",
    "evaluate_batch",
    "get_backend",
    "hilbert_coordinates",
    "hilbert_index",
    "hilbert_order",
    "is_power_of_two",
    "load_parameters",
    "plot_frame",
    "preset",
    "save_parameters",
    "snoise2",
    "snoise3",
    "vertex_program",
]
