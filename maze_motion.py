"""Camera-relative movement and the cell-to-cell step animation.

The resolver is either idle at a cell center or stepping toward a
neighbouring cell. Input arrives in the shape of ursina's `held_keys`
(key name -> 0/1) together with the camera forward vector in grid frame
(grid rows along +z).
"""
import logging

from maze_grid import cell_center, closest_direction, direction_vector, step, DIRECTION_NAMES

log = logging.getLogger(__name__)

STEP_DURATION = 0.2  # seconds per cell

# Priority order: up > right > down > left. Index is the offset from the camera direction.
MOVE_KEYS = ['up arrow', 'right arrow', 'down arrow', 'left arrow']
CAMERA_MODIFIER_KEYS = ['shift', 'left shift', 'right shift']


class StepAnimation:
    __slots__ = ('direction', 'elapsed', 'key')

    def __init__(self, direction, key, elapsed=0.0):
        self.direction = direction
        self.key = key
        self.elapsed = elapsed

    def __repr__(self):
        return f"StepAnimation({DIRECTION_NAMES[self.direction]}, elapsed={self.elapsed:.3f})"


def camera_modifier_held(held_keys):
    return any(held_keys.get(k, 0) for k in CAMERA_MODIFIER_KEYS)


def pressed_move_key(held_keys):
    """Offset (0..3) of the highest-priority held arrow key, or None.

    Nothing counts while a camera modifier is held, those arrows orbit the camera.
    """
    if camera_modifier_held(held_keys):
        return None
    for offset, key in enumerate(MOVE_KEYS):
        if held_keys.get(key, 0):
            return offset
    return None


def resolve_direction(forward, key_offset):
    return (closest_direction(forward) + key_offset) % 4


class MotionResolver:
    def __init__(self, level, step_duration=STEP_DURATION):
        if step_duration <= 0:
            raise ValueError(f"step_duration must be positive, got {step_duration}")
        self.step_duration = step_duration
        self.animation = None
        self.arrived_at_exit = False
        self.generation = level.generation
        self.visual_position = cell_center(level.player_position)

    @property
    def is_idle(self):
        return self.animation is None

    def reset(self, level):
        self.animation = None
        self.arrived_at_exit = False
        self.generation = level.generation
        self.visual_position = cell_center(level.player_position)

    def try_start_step(self, level, held_keys, forward):
        offset = pressed_move_key(held_keys)
        if offset is None:
            return False
        direction = resolve_direction(forward, offset)
        if not level.is_cell_empty(step(level.player_position, direction)):
            return False
        self.animation = StepAnimation(direction, MOVE_KEYS[offset])
        return True

    def update(self, level, held_keys, forward, dt):
        """Advance one frame. Returns True when a step was committed this frame.

        A step landing on the exit ends the motion there and sets `arrived_at_exit`
        for the frame, even when the key is still held.
        """
        self.arrived_at_exit = False
        if level.generation != self.generation:
            log.debug("Maze generation %d -> %d, dropping %s", self.generation, level.generation, self.animation)
            self.reset(level)

        if self.animation is None:
            self.try_start_step(level, held_keys, forward)
            return False

        anim = self.animation
        anim.elapsed += dt
        committed = False
        while anim.elapsed >= self.step_duration:
            level.move_player(anim.direction)
            committed = True
            if level.is_exit_reached():
                self.arrived_at_exit = True
                self.animation = None
                self.visual_position = cell_center(level.player_position)
                return committed
            ahead = step(level.player_position, anim.direction)
            if held_keys.get(anim.key, 0) and not camera_modifier_held(held_keys) and level.is_cell_empty(ahead):
                anim.elapsed -= self.step_duration
                continue
            self.animation = None
            self.visual_position = cell_center(level.player_position)
            return committed

        cx, cy, cz = cell_center(level.player_position)
        dx, _, dz = direction_vector(anim.direction)
        t = anim.elapsed / self.step_duration
        self.visual_position = (cx + dx * t, cy, cz + dz * t)
        return committed
