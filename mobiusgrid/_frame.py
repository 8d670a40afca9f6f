"""
Frame driver for a deforming lattice.

One ``Lattice`` owns everything that changes between frames: the cell
sequence, the rotation modulator state and the animation clock. Each call to
``step`` runs one frame of the loop

    read parameters -> advance time -> update rotation -> evaluate every cell

and returns the positions for the rendering surface. ``Lattice`` is not
thread safe; it is driven from a single thread.
"""
import logging

import numpy

from mobiusgrid._backend import get_backend
from mobiusgrid._grid import GridBuilder, GridConfiguration, cell_coordinates
from mobiusgrid._kernel import Uniforms
from mobiusgrid._params import TransformParameters
from mobiusgrid._rotation import RotationModulator
from mobiusgrid._transform import evaluate_cells

# Clock increment of one frame
FRAME_DT = 0.01


class Lattice:
    def __init__(self, rows=8, cols=8, params=None, backend=None, seed=0,
                 rotation_seed=None):
        """
        A deformable lattice of rows x cols cells.

        Important objects:
            Lattice.cells: The ordered cell sequence of the current grid
            Lattice.G: The GridBuilder owning the cell cache
            Lattice.rotation: The RotationModulator of this session

        :param rows: int, number of lattice rows
        :param cols: int, number of lattice columns
        :param params: TransformParameters, optional, the defaults when None
        :param backend: str or backend instance used for the parallel path
                        (see mobiusgrid._backend.get_backend)
        :param seed: int, noise seed shared by both evaluation paths
        :param rotation_seed: seed for the ``random`` rotation pattern
        """
        self.G = GridBuilder()
        self.rotation = RotationModulator(seed=rotation_seed)
        self.params = params if params is not None else TransformParameters()
        if backend is None or isinstance(backend, str):
            backend = get_backend(backend)
        self.backend = backend
        self.seed = seed

        self.time = 0.0
        self.rotation_timer = 0.0
        self.frame = 0

        self.set_grid(GridConfiguration(rows, cols))

    # %% External inputs
    def set_grid(self, config):
        """Rebuild the cell sequence for a new configuration."""
        self.config = GridConfiguration(*config)
        self.cells = self.G.build(self.config)
        self._coords = cell_coordinates(self.cells)
        logging.debug(f"Lattice {self.config.rows}x{self.config.cols} holds "
                      f"{len(self.cells)} cells")

    def set_parameters(self, params):
        """Swap in a new parameter snapshot."""
        self.params = params

    def reset(self):
        """Restart the session clock and rotation state."""
        self.time = 0.0
        self.rotation_timer = 0.0
        self.frame = 0
        self.rotation.reset()

    # %% Frame state
    @property
    def frame_parameters(self):
        """The snapshot of this frame, factor signed by the rotation state."""
        return self.params.with_factor_sign(self.rotation.direction)

    @property
    def coordinates(self):
        """(N, 2) array of base coordinates in cell order."""
        return self._coords

    def uniforms(self):
        """Uniform block of the current frame for the vertex program."""
        return Uniforms.from_parameters(self.frame_parameters, self.time)

    def advance(self, dt=FRAME_DT):
        """Advance the clocks by dt and update the rotation direction."""
        self.time += dt
        self.rotation_timer += dt
        self.frame += 1
        self.rotation.update(self.rotation_timer,
                             self.params.rotation_modulation)

    # %% Outputs
    def positions(self, path="parallel"):
        """
        Positions of every cell at the current time.

        :param path: "parallel" for the batch backend, "cpu" for the scalar
                     matrix pipeline
        :return: ndarray of shape (N, 3), in cell order
        """
        params = self.frame_parameters
        if path == "cpu":
            return evaluate_cells(self.cells, self.time, params,
                                  seed=self.seed)
        if path == "parallel":
            if len(self.cells) == 0:
                return numpy.empty((0, 3))
            return self.backend.batch_evaluate(self._coords, params,
                                               self.time, seed=self.seed)
        raise ValueError(f"Unknown evaluation path {path!r}, "
                         f"use 'cpu' or 'parallel'")

    def colors(self, positions):
        """Color-ready scalars of a frame's positions."""
        return self.backend.batch_color_scalar(positions[:, 2],
                                               self.params.amplitude)

    def step(self, dt=FRAME_DT, path="parallel"):
        """Run one frame and return its positions."""
        self.advance(dt)
        return self.positions(path=path)
