import argparse
import logging
import sys

from ursina import *

from maze_grid import OPEN, cell_center
from maze_level import MazeLevel
from maze_motion import MotionResolver, camera_modifier_held
from maze_settings import (COMPLEXITY_LEVELS, SETTINGS_FILE_PATH, complexity_label, load_settings,
                           next_complexity, starting_rooms)

log = logging.getLogger(__name__)

WINDOW_TITLE = 'Maze 3D (Arrows: Move, Shift+Arrows: Camera, F1: Help, Esc: Menu)'
MIN_PITCH, MAX_PITCH = 10, 85
MAP_SIZE = 0.4
MENU_SELECTED_COLOR = color.orange
MENU_NORMAL_COLOR = color.white

HELP_TEXT = ("Help: F1\n"
             "Movement: Arrow Keys\n"
             "Camera: Shift + Arrow Keys\n"
             "Restart: R\n"
             "Minimap: M\n"
             "FPS: F2\n"
             "Menu: Escape")


def to_world(center):
    """Grid-frame point (rows along +z) to ursina space, where rows run along -z."""
    x, y, z = center
    return Vec3(x, y, -z)


def to_grid_frame(forward):
    return (forward.x, forward.y, -forward.z)


class MazeGame(Entity):
    def __init__(self, settings, **kwargs):
        super().__init__(**kwargs)
        self.settings = settings
        self.complexity = settings.complexity
        self.rooms = starting_rooms(settings)
        self.level = MazeLevel(*self.rooms)
        self.motion = MotionResolver(self.level, settings.step_duration)
        self.rendered_generation = None
        self.in_game = False
        self.game_started = False

        self.textures = {
            'wall': load_texture('wall_texture'), 'floor': load_texture('floor_texture'),
        }
        self.maze_root = None
        self.floor = None
        self.player = Entity(model='sphere', color=color.red, scale=0.8)
        self.exit_marker = Entity(model='sphere', color=color.lime, scale=0.8)

        self.camera_rig = Entity(rotation=(settings.camera_pitch, 0, 0))
        camera.parent = self.camera_rig
        camera.position = (0, 0, -settings.camera_distance)
        camera.rotation = (0, 0, 0)

        self.minimap = Entity(parent=camera.ui, scale=MAP_SIZE,
                              position=(window.aspect_ratio * 0.5 - MAP_SIZE * 0.5 - 0.01, 0.5 - MAP_SIZE * 0.5 - 0.01),
                              enabled=settings.show_minimap)
        self.minimap_content = None
        self.minimap_player = Entity(parent=self.minimap, model='circle', color=color.red, z=-1)
        self.minimap_exit = Entity(parent=self.minimap, model='circle', color=color.lime, z=-1)

        self.help_text = Text(HELP_TEXT, parent=camera.ui, origin=(-0.5, 0.5),
                              position=window.top_left + Vec2(0.02, -0.02), scale=0.9, enabled=settings.show_help)
        window.fps_counter.enabled = settings.show_fps

        self.menu_root = Entity(parent=camera.ui, z=-5)
        self.menu_title = None
        self.menu_items = []
        self.menu_selection = 0
        self.open_menu('Maze 3D')

    # --- Scene ---
    def grid_to_minimap_pos(self, x, y):
        size = max(self.level.width, self.level.height)
        return Vec2(x / size - 0.5, -(y / size - 0.5))

    def rebuild_scene(self):
        level = self.level
        if self.maze_root: destroy(self.maze_root)
        if self.floor: destroy(self.floor)
        wall_tex = self.textures.get('wall')
        self.maze_root = Entity()
        for y in range(level.height):
            for x in range(level.width):
                if level.grid[y, x] != OPEN:
                    Entity(parent=self.maze_root, model='cube', position=(x + 0.5, 0.5, -(y + 0.5)))
        self.maze_root.combine()
        self.maze_root.texture = wall_tex
        self.maze_root.color = color.white if wall_tex else color.olive

        floor_tex = self.textures.get('floor')
        self.floor = Entity(model='plane', scale=(level.width, 1, level.height),
                            position=(level.width / 2, 0, -level.height / 2),
                            texture=floor_tex, texture_scale=(level.width, level.height),
                            color=color.white if floor_tex else color.dark_gray)
        self.exit_marker.position = to_world(cell_center(level.exit_position))
        self.rebuild_minimap()
        self.rendered_generation = level.generation
        log.debug("Rendered maze generation %d", level.generation)

    def rebuild_minimap(self):
        level = self.level
        if self.minimap_content: destroy(self.minimap_content)
        size = max(level.width, level.height)
        self.minimap_content = Entity(parent=self.minimap)
        for y in range(level.height):
            for x in range(level.width):
                if level.grid[y, x] == OPEN:
                    Entity(parent=self.minimap_content, model='quad', position=self.grid_to_minimap_pos(x + 0.5, y + 0.5), scale=1 / size)
        self.minimap_content.combine()
        self.minimap_content.color = color.white50
        self.minimap_player.scale = self.minimap_exit.scale = (1 / size) * 0.9
        self.minimap_exit.position = self.grid_to_minimap_pos(level.exit_position.x + 0.5, level.exit_position.y + 0.5)

    # --- Menu ---
    def menu_entries(self):
        entries = []
        if self.game_started: entries.append(('Resume', self.close_menu))
        entries.append(('New Game', self.new_game))
        entries.append((f'Complexity: {complexity_label(self.complexity, self.rooms)}', self.cycle_complexity))
        entries.append(('Exit', application.quit))
        return entries

    def open_menu(self, title=None):
        self.in_game = False
        for child in list(self.menu_root.children): destroy(child)
        Entity(parent=self.menu_root, model='quad', color=color.black66, scale=(window.aspect_ratio, 1), z=1)
        self.menu_title = Text(title or 'Paused', parent=self.menu_root, origin=(0, 0), y=0.3, scale=3)
        self.menu_items = []
        for i, (label, action) in enumerate(self.menu_entries()):
            item = Text(label, parent=self.menu_root, origin=(0, 0), y=0.1 - i * 0.1, scale=2)
            self.menu_items.append((item, action))
        self.menu_selection = min(self.menu_selection, len(self.menu_items) - 1)
        self.menu_root.enabled = True
        self.update_menu_visuals()

    def close_menu(self):
        self.menu_root.enabled = False
        self.in_game = True

    def update_menu_visuals(self):
        for i, (item, _) in enumerate(self.menu_items):
            item.color = MENU_SELECTED_COLOR if i == self.menu_selection else MENU_NORMAL_COLOR

    def new_game(self):
        self.level.regenerate_with_size(*self.rooms)
        self.game_started = True
        self.close_menu()

    def cycle_complexity(self):
        self.complexity = next_complexity(self.complexity)
        self.rooms = COMPLEXITY_LEVELS[self.complexity]
        log.info("Complexity set to %s %s", self.complexity, COMPLEXITY_LEVELS[self.complexity])
        self.open_menu(self.menu_title.text)

    def menu_input(self, key):
        if key == 'up arrow': self.menu_selection = (self.menu_selection - 1) % len(self.menu_items)
        elif key == 'down arrow': self.menu_selection = (self.menu_selection + 1) % len(self.menu_items)
        elif key == 'enter': self.menu_items[self.menu_selection][1](); return
        elif key == 'escape':
            if self.game_started: self.close_menu()
            else: application.quit()
            return
        self.update_menu_visuals()

    # --- Frame ---
    def orbit_camera(self):
        if not camera_modifier_held(held_keys): return
        turn = self.settings.camera_turn_speed * time.dt
        self.camera_rig.rotation_y += (held_keys['right arrow'] - held_keys['left arrow']) * turn
        pitch = self.camera_rig.rotation_x + (held_keys['up arrow'] - held_keys['down arrow']) * turn
        self.camera_rig.rotation_x = clamp(pitch, MIN_PITCH, MAX_PITCH)

    def update(self):
        if self.rendered_generation != self.level.generation:
            self.rebuild_scene()
        if self.in_game:
            self.orbit_camera()
            self.motion.update(self.level, held_keys, to_grid_frame(camera.forward), time.dt)
            if self.motion.arrived_at_exit:
                log.info("Exit reached at %s (generation %d)", self.level.exit_position, self.level.generation)
                self.game_started = False
                self.open_menu('You escaped!')
        elif self.motion.generation != self.level.generation:
            self.motion.reset(self.level)

        self.player.position = to_world(self.motion.visual_position)
        self.camera_rig.position = self.player.position
        px, _, pz = self.motion.visual_position
        self.minimap_player.position = self.grid_to_minimap_pos(px, pz)

    def input(self, key):
        if key == 'f1':
            self.help_text.enabled = not self.help_text.enabled
        elif key == 'f2':
            window.fps_counter.enabled = not window.fps_counter.enabled
        elif not self.in_game:
            self.menu_input(key)
        elif key == 'escape':
            self.open_menu()
        elif key == 'r':
            self.level.regenerate()
        elif key == 'm':
            self.minimap.enabled = not self.minimap.enabled


def main(argv=None):
    parser = argparse.ArgumentParser(description='Interactive 3D maze')
    parser.add_argument('--settings', default=SETTINGS_FILE_PATH, help='path to a JSON settings file')
    parser.add_argument('--log-level', default=None, help='logging level (overrides the settings file)')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    settings = load_settings(args.settings)
    level_name = (args.log_level or settings.log_level).upper()
    log_level = logging.getLevelName(level_name)
    logging.getLogger().setLevel(log_level if isinstance(log_level, int) else logging.INFO)

    app = Ursina(); app.development_mode = False; Sky()
    window.title = WINDOW_TITLE; window.borderless = False
    window.fullscreen = False; window.exit_button.visible = False
    MazeGame(settings)
    app.run()


if __name__ == '__main__':
    sys.exit(main())
