"""The maze aggregate shared by every game system.

MazeLevel owns the grid and the player/exit cells. `generation` is bumped
once per regeneration and is the only signal the view code uses to notice
that the maze was replaced; player steps never touch it.
"""
import logging
import random

from maze_grid import OPEN, Vec2i, step, to_unsigned
from maze_generator import generate_grid, grid_size_for_rooms
from maze_placement import place_start_and_exit

log = logging.getLogger(__name__)


class MazeLevel:
    def __init__(self, rooms_x, rooms_y, rng=None):
        self.rng = rng or random
        self.grid = None
        self.width = 0
        self.height = 0
        self.rooms_x = 0
        self.rooms_y = 0
        self.player_position = Vec2i(0, 0)
        self.exit_position = Vec2i(0, 0)
        self.generation = 0
        self.regenerate_with_size(rooms_x, rooms_y)

    @property
    def rooms(self):
        return self.rooms_x, self.rooms_y

    def dimensions(self):
        return self.width, self.height

    def regenerate_with_size(self, rooms_x, rooms_y):
        """Replace the maze with a fresh one of rooms_x by rooms_y rooms.

        Raises ValueError for room counts below 1, before anything changes.
        """
        width, height = grid_size_for_rooms(rooms_x, rooms_y)
        grid = generate_grid(rooms_x, rooms_y, self.rng)
        start, exit_pos = place_start_and_exit(grid, self.rng)

        self.grid = grid
        self.width, self.height = width, height
        self.rooms_x, self.rooms_y = rooms_x, rooms_y
        self.player_position = start
        self.exit_position = exit_pos
        self.generation += 1
        log.info("Generated %dx%d maze (generation %d): start %s, exit %s",
                 width, height, self.generation, start, exit_pos)
        if log.isEnabledFor(logging.DEBUG):
            log.debug("Maze layout:\n%s", self.as_text())
        return self.generation

    new_or_regenerate = regenerate_with_size

    def regenerate(self):
        return self.regenerate_with_size(self.rooms_x, self.rooms_y)

    def is_cell_empty(self, pos):
        """True only for an in-bounds open cell. The single legality gate for movement."""
        idx = to_unsigned(pos)
        if idx is None:
            return False
        x, y = idx
        if x >= self.width or y >= self.height:
            return False
        return bool(self.grid[y, x] == OPEN)

    def move_player(self, direction):
        target = step(self.player_position, direction)
        if not self.is_cell_empty(target):
            return False
        self.player_position = target
        return True

    def is_exit_reached(self):
        return self.player_position == self.exit_position

    def as_text(self):
        lines = []
        for y in range(self.height):
            row = ''
            for x in range(self.width):
                pos = Vec2i(x, y)
                if pos == self.player_position: row += 'S'
                elif pos == self.exit_position: row += 'E'
                else: row += ' ' if self.grid[y, x] == OPEN else '#'
            lines.append(row)
        return '\n'.join(lines)
