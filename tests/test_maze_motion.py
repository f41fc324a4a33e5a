import random

import numpy as np
import pytest

from maze_grid import DOWN, LEFT, OPEN, RIGHT, UP, WALL, Vec2i, direction_vector, step
from maze_level import MazeLevel
from maze_motion import MotionResolver, pressed_move_key, resolve_direction

FACING_UP = direction_vector(UP)


def _level(rows, player, exit_pos=Vec2i(0, 0)):
    """Level with a hand-drawn layout: '#' wall, anything else open."""
    level = MazeLevel(1, 1)
    level.exit_position = exit_pos
    level.grid = np.array([[WALL if c == '#' else OPEN for c in row] for row in rows], dtype=np.uint8)
    level.height, level.width = level.grid.shape
    level.player_position = player
    return level


def _corridor(player=Vec2i(1, 1)):
    return _level(["#######",
                   "#     #",
                   "#######"], player)


def test_pressed_move_key_priority_and_modifier():
    assert pressed_move_key({}) is None
    assert pressed_move_key({'left arrow': 1}) == 3
    assert pressed_move_key({'left arrow': 1, 'down arrow': 1, 'right arrow': 1}) == 1
    assert pressed_move_key({'up arrow': 1, 'right arrow': 1}) == 0
    assert pressed_move_key({'up arrow': 1, 'shift': 1}) is None
    assert pressed_move_key({'up arrow': 1, 'left shift': 1}) is None


def test_resolve_direction_is_camera_relative():
    assert resolve_direction(FACING_UP, 1) == RIGHT
    assert resolve_direction(direction_vector(RIGHT), 0) == RIGHT
    assert resolve_direction(direction_vector(LEFT), 2) == RIGHT
    assert resolve_direction(direction_vector(DOWN), 3) == RIGHT


def test_starts_idle_at_player_cell_center():
    level = _corridor()
    motion = MotionResolver(level)
    assert motion.is_idle
    assert motion.visual_position == (1.5, 0.5, 1.5)


def test_no_key_stays_idle():
    level = _corridor()
    motion = MotionResolver(level)
    assert motion.update(level, {}, FACING_UP, 0.1) is False
    assert motion.is_idle and level.player_position == Vec2i(1, 1)


def test_step_into_wall_is_rejected():
    level = _corridor()
    motion = MotionResolver(level)
    motion.update(level, {'up arrow': 1}, FACING_UP, 0.1)
    motion.update(level, {'up arrow': 1}, FACING_UP, 0.5)
    assert motion.is_idle
    assert level.player_position == Vec2i(1, 1)
    assert motion.visual_position == (1.5, 0.5, 1.5)


def test_blocked_priority_key_does_not_fall_back_to_next_key():
    level = _corridor()
    motion = MotionResolver(level)
    motion.update(level, {'up arrow': 1, 'right arrow': 1}, FACING_UP, 0.1)
    assert motion.is_idle


def test_modifier_key_suppresses_movement():
    level = _corridor()
    motion = MotionResolver(level)
    motion.update(level, {'right arrow': 1, 'shift': 1}, FACING_UP, 0.1)
    assert motion.is_idle


def test_single_step_interpolates_then_snaps():
    level = _corridor()
    motion = MotionResolver(level, step_duration=0.2)
    keys = {'right arrow': 1}

    assert motion.update(level, keys, FACING_UP, 0.016) is False
    assert not motion.is_idle
    assert motion.animation.direction == RIGHT and motion.animation.elapsed == 0.0

    motion.update(level, keys, FACING_UP, 0.1)
    assert motion.visual_position == pytest.approx((2.0, 0.5, 1.5))
    assert level.player_position == Vec2i(1, 1)

    assert motion.update(level, {}, FACING_UP, 0.15) is True
    assert motion.is_idle
    assert level.player_position == Vec2i(2, 1)
    assert motion.visual_position == (2.5, 0.5, 1.5)


def test_held_key_continues_with_overshoot():
    level = _corridor()
    motion = MotionResolver(level, step_duration=0.2)
    keys = {'right arrow': 1}
    motion.update(level, keys, FACING_UP, 0.016)
    assert motion.update(level, keys, FACING_UP, 0.25) is True
    assert level.player_position == Vec2i(2, 1)
    assert not motion.is_idle
    assert motion.animation.elapsed == pytest.approx(0.05)
    assert motion.visual_position == pytest.approx((2.75, 0.5, 1.5))


def test_held_key_stops_at_wall():
    level = _corridor(Vec2i(4, 1))
    motion = MotionResolver(level, step_duration=0.2)
    keys = {'right arrow': 1}
    motion.update(level, keys, FACING_UP, 0.016)
    motion.update(level, keys, FACING_UP, 0.3)
    assert level.player_position == Vec2i(5, 1)
    assert motion.is_idle
    assert motion.visual_position == (5.5, 0.5, 1.5)


def test_long_frame_covers_several_cells():
    level = _corridor()
    motion = MotionResolver(level, step_duration=0.2)
    keys = {'right arrow': 1}
    motion.update(level, keys, FACING_UP, 0.016)
    motion.update(level, keys, FACING_UP, 0.5)
    assert level.player_position == Vec2i(3, 1)
    assert motion.animation.elapsed == pytest.approx(0.1)


def test_continuation_needs_the_same_key():
    level = _level(["#####",
                    "#   #",
                    "# ###",
                    "#####"], Vec2i(1, 1))
    motion = MotionResolver(level, step_duration=0.2)
    motion.update(level, {'right arrow': 1}, FACING_UP, 0.016)
    # Switching to another key mid-step finishes the step and stops.
    motion.update(level, {'down arrow': 1}, FACING_UP, 0.25)
    assert level.player_position == Vec2i(2, 1)
    assert motion.is_idle


def test_camera_orientation_changes_movement():
    level = _level(["#####",
                    "#   #",
                    "#####"], Vec2i(2, 1))
    motion = MotionResolver(level, step_duration=0.2)
    # Camera facing left: "up" walks left.
    motion.update(level, {'up arrow': 1}, direction_vector(LEFT), 0.016)
    motion.update(level, {}, direction_vector(LEFT), 0.3)
    assert level.player_position == Vec2i(1, 1)


def test_regeneration_resets_in_flight_step():
    level = MazeLevel(6, 6, random.Random(11))
    motion = MotionResolver(level)
    start = level.player_position
    d = next(d for d in (UP, RIGHT, DOWN, LEFT) if level.is_cell_empty(step(start, d)))
    # Pick a key so the resolved direction is the open one with the camera facing up.
    key = ['up arrow', 'right arrow', 'down arrow', 'left arrow'][d]
    motion.update(level, {key: 1}, FACING_UP, 0.016)
    assert not motion.is_idle

    level.regenerate()
    motion.update(level, {}, FACING_UP, 0.1)
    assert motion.is_idle
    assert motion.generation == level.generation
    p = level.player_position
    assert motion.visual_position == (p.x + 0.5, 0.5, p.y + 0.5)


def test_step_duration_must_be_positive():
    with pytest.raises(ValueError):
        MotionResolver(_corridor(), step_duration=0)


def test_long_frame_stops_on_exit_cell():
    level = _level(["#######",
                    "#     #",
                    "#######"], Vec2i(1, 1), exit_pos=Vec2i(2, 1))
    motion = MotionResolver(level, step_duration=0.2)
    keys = {'right arrow': 1}
    motion.update(level, keys, FACING_UP, 0.016)
    assert motion.update(level, keys, FACING_UP, 0.45) is True
    assert level.player_position == Vec2i(2, 1)
    assert level.is_exit_reached()
    assert motion.arrived_at_exit
    assert motion.is_idle
    assert motion.visual_position == (2.5, 0.5, 1.5)

    # The flag only describes the frame that landed on the exit.
    motion.update(level, {}, FACING_UP, 0.016)
    assert not motion.arrived_at_exit


def test_passing_cells_other_than_exit_does_not_flag_arrival():
    level = _corridor()
    motion = MotionResolver(level, step_duration=0.2)
    keys = {'right arrow': 1}
    motion.update(level, keys, FACING_UP, 0.016)
    motion.update(level, keys, FACING_UP, 0.45)
    assert level.player_position == Vec2i(3, 1)
    assert not motion.arrived_at_exit
