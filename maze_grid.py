"""Grid coordinates, the cardinal direction basis and cell constants.

Cells are addressed as (x, y): x is the column, y the row, origin at the
top-left. Grids are numpy arrays indexed grid[y, x].
"""
from dataclasses import dataclass

# --- Cell values ---
WALL = 0
OPEN = 1

# --- Directions (fixed cyclic order, camera mapping depends on it) ---
UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
DX4 = [0, 1, 0, -1]; DY4 = [-1, 0, 1, 0]
DIRECTION_NAMES = ['up', 'right', 'down', 'left']


@dataclass(frozen=True)
class Vec2i:
    x: int
    y: int

    def __add__(self, other):
        return Vec2i(self.x + other.x, self.y + other.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Vec2i({self.x}, {self.y})"


DIRECTIONS = [Vec2i(DX4[d], DY4[d]) for d in range(4)]


def add(a, b):
    return a + b


def step(origin, direction):
    """Return the neighbour of `origin` one cell along `direction` (0..3)."""
    return origin + DIRECTIONS[direction % 4]


def to_unsigned(pos):
    """(x, y) usable as array indices, or None when either part is negative."""
    if pos.x < 0 or pos.y < 0:
        return None
    return pos.x, pos.y


def direction_vector(direction):
    """3D projection of a grid direction; grid rows run along +z."""
    return (float(DX4[direction]), 0.0, float(DY4[direction]))


def closest_direction(forward):
    """Index of the direction whose 3D projection best matches `forward`.

    Ties go to the first direction in UP, RIGHT, DOWN, LEFT order.
    """
    fx, _, fz = forward
    best, best_dot = UP, None
    for d in range(4):
        dot = fx * DX4[d] + fz * DY4[d]
        if best_dot is None or dot > best_dot:
            best, best_dot = d, dot
    return best


def cell_center(pos):
    return (pos.x + 0.5, 0.5, pos.y + 0.5)
