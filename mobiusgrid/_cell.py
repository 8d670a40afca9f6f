"""Cell objects and the flyweight cache that owns them"""


class Cell(object):
    """
    Intrinsic identity of one lattice coordinate.

    Cells are immutable and are only created through a CellCache, so two
    cells with equal coordinates drawn from the same cache are the same
    object.
    """
    __slots__ = ('base_x', 'base_y', 'index')

    def __init__(self, base_x, base_y, index=None):
        object.__setattr__(self, 'base_x', base_x)
        object.__setattr__(self, 'base_y', base_y)
        object.__setattr__(self, 'index', index)

    def __setattr__(self, name, value):
        raise AttributeError("Cell objects are immutable")

    def __delattr__(self, name):
        raise AttributeError("Cell objects are immutable")

    @property
    def x(self):
        """Coordinate tuple, the cache key of this cell"""
        return (self.base_x, self.base_y)

    def __hash__(self):
        return hash(self.x)

    def __repr__(self):
        return "Cell({}, {})".format(self.base_x, self.base_y)

    def __reduce__(self):
        # Copies are detached from the cache and do not share its identity
        return (Cell, (self.base_x, self.base_y, self.index))

    def transformed_position(self, transform_fn):
        """Apply transform_fn(base_x, base_y) to the intrinsic coordinate."""
        return transform_fn(self.base_x, self.base_y)


class CellCache(object):
    """
    Flyweight store mapping an integer coordinate to its shared Cell.

    The cache is unbounded and scoped to one grid configuration; a new
    configuration gets a new cache. Not thread safe, the frame loop that owns
    it is the only caller.
    """
    def __init__(self):
        self.cache = {}
        self.size = 0  # Total size of cache
        self.index = -1

    def __getitem__(self, x):
        try:
            return self.cache[x]
        except KeyError:
            self.index += 1
            cell = Cell(x[0], x[1], index=self.index)
            self.cache[x] = cell
            self.size += 1
            return cell

    def get_or_create(self, x, y):
        """Shared Cell for coordinate (x, y), created on first request."""
        return self[(x, y)]

    def __contains__(self, x):
        return x in self.cache

    def __iter__(self):
        return iter(self.cache.values())

    def __len__(self):
        return len(self.cache)
