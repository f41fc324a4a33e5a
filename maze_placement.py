import logging
import random
from collections import deque

import numpy as np

from maze_grid import OPEN, DX4, DY4, Vec2i

log = logging.getLogger(__name__)


def open_cells(grid):
    return [Vec2i(int(x), int(y)) for y, x in np.argwhere(grid == OPEN)]


def _flood(grid, origin):
    """BFS over open cells. Returns the distance map and the first cell found at the greatest depth."""
    height, width = grid.shape
    distances = np.full((height, width), -1, dtype=np.int32)
    distances[origin.y, origin.x] = 0
    farthest, farthest_dist = origin, 0
    q = deque([(origin.x, origin.y)])
    while q:
        x, y = q.popleft()
        dist = distances[y, x] + 1
        for dir4 in range(4):
            nx, ny = x + DX4[dir4], y + DY4[dir4]
            if 0 <= nx < width and 0 <= ny < height and grid[ny, nx] == OPEN and distances[ny, nx] == -1:
                distances[ny, nx] = dist
                q.append((nx, ny))
                if dist > farthest_dist:
                    farthest, farthest_dist = Vec2i(nx, ny), int(dist)
    return distances, farthest


def distance_map(grid, origin):
    """Step counts from `origin` to every open cell, -1 where unreachable."""
    return _flood(grid, origin)[0]


def place_start_and_exit(grid, rng=None):
    """Pick a random open cell as start and the cell farthest from it as exit.

    One BFS from a random seed, not a diameter search: the pair is far apart
    but not necessarily the longest path in the maze.
    """
    rng = rng or random
    cells = open_cells(grid)
    if not cells:
        raise ValueError("Cannot place start and exit in a grid with no open cells")
    start = cells[rng.randrange(len(cells))]
    distances, exit_pos = _flood(grid, start)
    log.debug("Start %s, exit %s at distance %d", start, exit_pos, distances[exit_pos.y, exit_pos.x])
    return start, exit_pos
