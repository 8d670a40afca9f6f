"""
Lattice enumeration.

GridBuilder walks a rows x cols configuration in row-major order, resolves
every coordinate through a CellCache and, for square power-of-two grids only,
sorts the result along the Hilbert curve.
"""
import logging
from collections import namedtuple

import numpy

from mobiusgrid._cell import CellCache
from mobiusgrid._hilbert import hilbert_index, is_power_of_two


class GridConfiguration(namedtuple('GridConfiguration', ['rows', 'cols'])):
    """Dimensions of the lattice. Powers of two get Hilbert ordering."""
    __slots__ = ()

    @property
    def hilbert_ordered(self):
        return self.rows == self.cols and is_power_of_two(self.rows)

    @property
    def empty(self):
        return self.rows <= 0 or self.cols <= 0


class GridBuilder(object):
    def __init__(self):
        """
        Builds ordered cell sequences for grid configurations.

        Important objects:
            GridBuilder.V: The CellCache of the current configuration
            GridBuilder.config: The configuration V was built for
        """
        self.V = CellCache()
        self.config = None

    def build(self, config):
        """
        Ordered list of cells for a configuration.

        A configuration different from the previous build starts a fresh
        cache, so cells of the old lattice are released.

        :param config: GridConfiguration or (rows, cols) tuple
        :return: list of Cell, Hilbert ordered when the grid is square with a
                 power-of-two side, row-major otherwise
        """
        config = GridConfiguration(*config)
        if config != self.config:
            if self.config is not None:
                logging.debug("Grid configuration changed from {} to {}, "
                              "rebuilding cell cache".format(self.config,
                                                             config))
            self.V = CellCache()
            self.config = config

        if config.empty:
            logging.debug("Empty grid configuration {}".format(config))
            return []

        cells = []
        for y in range(config.rows):
            for x in range(config.cols):
                cells.append(self.V.get_or_create(x, y))

        if config.hilbert_ordered:
            n = config.rows
            cells.sort(key=lambda c: hilbert_index(n, c.base_x, c.base_y))

        return cells


def cell_coordinates(cells):
    """(N, 2) float array of the base coordinates of a cell sequence."""
    coords = numpy.empty((len(cells), 2))
    for i, c in enumerate(cells):
        coords[i, 0] = c.base_x
        coords[i, 1] = c.base_y
    return coords
