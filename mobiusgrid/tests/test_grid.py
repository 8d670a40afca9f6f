"""Tests for the cell cache and grid enumeration."""
import copy
import pickle

import pytest

from mobiusgrid._cell import Cell, CellCache
from mobiusgrid._grid import GridBuilder, GridConfiguration, cell_coordinates
from mobiusgrid._hilbert import hilbert_index, hilbert_order


class TestCellCache:
    def test_same_coordinate_same_object(self):
        V = CellCache()
        assert V.get_or_create(3, 5) is V.get_or_create(3, 5)

    def test_transposed_coordinate_is_distinct(self):
        V = CellCache()
        c1 = V.get_or_create(3, 5)
        c2 = V.get_or_create(5, 3)
        assert c1 is not c2
        assert (c2.base_x, c2.base_y) == (5, 3)

    def test_getitem_shares_cells(self):
        V = CellCache()
        assert V[(1, 2)] is V.get_or_create(1, 2)

    def test_size_and_index(self):
        V = CellCache()
        for x in range(4):
            V.get_or_create(x, 0)
            V.get_or_create(x, 0)
        assert len(V) == 4
        assert V.size == 4
        assert [c.index for c in V] == [0, 1, 2, 3]
        assert (2, 0) in V
        assert (9, 9) not in V

    def test_separate_caches_do_not_share(self):
        assert CellCache().get_or_create(0, 0) is not \
            CellCache().get_or_create(0, 0)


class TestCell:
    def test_immutable(self):
        c = CellCache().get_or_create(1, 2)
        with pytest.raises(AttributeError):
            c.base_x = 7
        with pytest.raises(AttributeError):
            del c.base_y
        assert c.x == (1, 2)

    def test_transformed_position(self):
        c = Cell(2, 3)
        assert c.transformed_position(lambda x, y: (x * 10, y - 1)) == (20, 2)

    def test_hash_matches_coordinate(self):
        assert hash(Cell(4, 1)) == hash((4, 1))

    def test_copy_and_pickle(self):
        c = CellCache().get_or_create(1, 2)
        for clone in (copy.copy(c), copy.deepcopy(c),
                      pickle.loads(pickle.dumps(c))):
            assert clone is not c
            assert (clone.base_x, clone.base_y, clone.index) == (1, 2, 0)
            with pytest.raises(AttributeError):
                clone.base_x = 3


class TestGridBuilder:
    def test_5x5_is_row_major(self):
        cells = GridBuilder().build(GridConfiguration(5, 5))
        assert [(c.base_x, c.base_y) for c in cells] == \
            [(x, y) for y in range(5) for x in range(5)]

    def test_8x8_is_hilbert_ordered(self):
        cells = GridBuilder().build(GridConfiguration(8, 8))
        ranks = [hilbert_index(8, c.base_x, c.base_y) for c in cells]
        assert ranks == list(range(64))

    def test_hilbert_grid_matches_curve_order(self):
        cells = GridBuilder().build((16, 16))
        assert [(c.base_x, c.base_y) for c in cells] == \
            [tuple(p) for p in hilbert_order(16).tolist()]

    def test_non_square_power_of_two_is_row_major(self):
        cells = GridBuilder().build((4, 8))
        assert len(cells) == 32
        assert [(c.base_x, c.base_y) for c in cells] == \
            [(x, y) for y in range(4) for x in range(8)]

    def test_single_cell(self):
        cells = GridBuilder().build((1, 1))
        assert [(c.base_x, c.base_y) for c in cells] == [(0, 0)]

    @pytest.mark.parametrize("config", [(0, 4), (4, 0), (-2, 3), (0, 0)])
    def test_invalid_configuration_is_empty(self, config):
        assert GridBuilder().build(config) == []

    def test_cells_come_from_cache(self):
        G = GridBuilder()
        cells = G.build((4, 4))
        assert len(G.V) == 16
        for c in cells:
            assert c is G.V.get_or_create(c.base_x, c.base_y)

    def test_rebuild_same_configuration_reuses_cells(self):
        G = GridBuilder()
        first = G.build((4, 4))
        second = G.build((4, 4))
        assert all(a is b for a, b in zip(first, second))

    def test_configuration_change_starts_fresh_cache(self):
        G = GridBuilder()
        old = G.build((4, 4))[0]
        G.build((2, 2))
        new = G.V.get_or_create(old.base_x, old.base_y)
        assert new is not old
        assert len(G.V) == 4

    def test_configuration_flags(self):
        assert GridConfiguration(16, 16).hilbert_ordered
        assert not GridConfiguration(6, 6).hilbert_ordered
        assert not GridConfiguration(8, 4).hilbert_ordered
        assert GridConfiguration(0, 3).empty

    def test_cell_coordinates(self):
        cells = GridBuilder().build((2, 2))
        coords = cell_coordinates(cells)
        assert coords.shape == (4, 2)
        assert [tuple(p) for p in coords] == \
            [(c.base_x, c.base_y) for c in cells]
