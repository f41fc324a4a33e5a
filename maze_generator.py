import logging
import random

import numpy as np

from maze_grid import WALL, OPEN, UP, RIGHT, DOWN, LEFT, DX4, DY4

log = logging.getLogger(__name__)

START_ROOM = (1, 1)


def grid_size_for_rooms(rooms_x, rooms_y):
    if rooms_x < 1 or rooms_y < 1:
        raise ValueError(f"Maze needs at least one room in each axis, got {rooms_x}x{rooms_y}")
    return 2 * rooms_x + 1, 2 * rooms_y + 1


def _shuffled_directions(rng):
    dirs = [UP, RIGHT, DOWN, LEFT]
    rng.shuffle(dirs)
    return dirs


def carve_maze(grid, rng=None):
    """Carve a perfect maze into an all-wall grid with a randomized backtracker.

    Rooms sit on odd coordinates; the cell between two rooms is opened when
    the backtracker moves across it. Frames on the stack keep the directions
    a room still has to try, so the visiting order is the same as the
    recursive formulation (random permutation per room, first fit wins).
    """
    rng = rng or random
    height, width = grid.shape
    if width < 3 or height < 3 or width % 2 == 0 or height % 2 == 0:
        raise ValueError(f"Grid must have odd dimensions of at least 3, got {width}x{height}")

    x, y = START_ROOM
    grid[y, x] = OPEN
    stack = [((x, y), _shuffled_directions(rng))]
    while stack:
        (x, y), remaining = stack[-1]
        if not remaining:
            stack.pop(); continue
        d = remaining.pop(0)
        nx, ny = x + 2 * DX4[d], y + 2 * DY4[d]
        if 0 < nx < width - 1 and 0 < ny < height - 1 and grid[ny, nx] == WALL:
            grid[ny, nx] = OPEN
            grid[y + DY4[d], x + DX4[d]] = OPEN
            stack.append(((nx, ny), _shuffled_directions(rng)))
    return grid


def generate_grid(rooms_x, rooms_y, rng=None):
    width, height = grid_size_for_rooms(rooms_x, rooms_y)
    grid = np.full((height, width), WALL, dtype=np.uint8)
    carve_maze(grid, rng)
    log.debug("Carved %dx%d maze (%d open cells)", width, height, int(np.count_nonzero(grid == OPEN)))
    return grid
