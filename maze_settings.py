import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

log = logging.getLogger(__name__)

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
SETTINGS_FILE_PATH = os.path.join(SCRIPT_DIR, 'maze_settings.json')

# Room counts per axis; the grid is 2 * rooms + 1 cells wide.
COMPLEXITY_LEVELS = {
    'Easy': (5, 5),
    'Normal': (10, 10),
    'Hard': (20, 20),
    'Insane': (40, 40),
}
DEFAULT_COMPLEXITY = 'Normal'


@dataclass
class GameSettings:
    rooms_x: Optional[int] = None  # overrides the complexity preset when set
    rooms_y: Optional[int] = None
    complexity: str = DEFAULT_COMPLEXITY
    step_duration: float = 0.2
    camera_turn_speed: float = 90.0   # degrees per second
    camera_pitch: float = 50.0        # degrees below the horizon
    camera_distance: float = 8.0
    show_fps: bool = False
    show_help: bool = True
    show_minimap: bool = True
    log_level: str = 'INFO'


def next_complexity(name):
    names = list(COMPLEXITY_LEVELS)
    if name not in COMPLEXITY_LEVELS:
        return names[0]
    return names[(names.index(name) + 1) % len(names)]


def starting_rooms(settings):
    """Room counts for the first game: explicit rooms_x/rooms_y, else the complexity preset."""
    preset_x, preset_y = COMPLEXITY_LEVELS[settings.complexity]
    return settings.rooms_x or preset_x, settings.rooms_y or preset_y


def complexity_label(name, rooms):
    if COMPLEXITY_LEVELS.get(name) == tuple(rooms):
        return name
    return f"Custom {rooms[0]}x{rooms[1]}"


def _coerce(settings):
    changes = {}
    for name in ('rooms_x', 'rooms_y'):
        rooms = getattr(settings, name)
        if rooms is not None and rooms < 1:
            log.warning("%s=%d clamped to 1", name, rooms)
            changes[name] = 1
    if settings.step_duration <= 0:
        log.warning("step_duration %r is not positive, using default", settings.step_duration)
        changes['step_duration'] = GameSettings.step_duration
    if settings.complexity not in COMPLEXITY_LEVELS:
        log.warning("Unknown complexity %r, using %s", settings.complexity, DEFAULT_COMPLEXITY)
        changes['complexity'] = DEFAULT_COMPLEXITY
    return replace(settings, **changes) if changes else settings


def _convert(default, value):
    """Coerce a JSON value to the type of the field default; strings and bools must match exactly."""
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise TypeError(f"expected true/false, got {value!r}")
        return value
    if isinstance(default, str):
        if not isinstance(value, str):
            raise TypeError(f"expected a string, got {value!r}")
        return value
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    if default is None:
        return int(value)
    return type(default)(value)


def settings_from_dict(data):
    known = {f.name: f for f in fields(GameSettings)}
    values = {}
    for key, value in data.items():
        if key not in known:
            log.warning("Ignoring unknown setting %r", key)
            continue
        try:
            values[key] = _convert(getattr(GameSettings, key), value)
        except (TypeError, ValueError):
            log.warning("Setting %r has invalid value %r, using default", key, value)
    return _coerce(GameSettings(**values))


def load_settings(path=SETTINGS_FILE_PATH):
    """Read game settings from a JSON file, falling back to defaults on any problem."""
    try:
        with open(path, 'r') as f: data = json.load(f)
    except FileNotFoundError:
        log.debug("No settings file at '%s', using defaults", path)
        return GameSettings()
    except (OSError, json.JSONDecodeError) as e:
        log.warning("Could not load or parse '%s': %s", path, e)
        return GameSettings()
    if not isinstance(data, dict):
        log.warning("Settings file '%s' must hold a JSON object", path)
        return GameSettings()
    return settings_from_dict(data)
