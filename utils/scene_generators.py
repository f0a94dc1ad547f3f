import random
import string
from dataclasses import replace

from state import (
    DEFAULT_BACKGROUND_COLOR,
    GameObject,
    Project,
    Scene,
    Settings,
    resolve_object_color,
    utc_timestamp,
)

TEMPLATE_NAMES = ["platformer", "rpg", "puzzle", "shooter"]

_ID_ALPHABET = string.ascii_lowercase + string.digits
_PUZZLE_COLORS = ['#ef4444', '#3b82f6', '#10b981', '#f59e0b', '#8b5cf6']


def generate_id(rng=None):
    """Returns a short random identifier such as 'k3x9a0q1z'."""
    rng = rng or random
    return ''.join(rng.choice(_ID_ALPHABET) for _ in range(9))


class _SceneBuilder:
    """Collects objects for one scene and keeps their ids unique."""

    def __init__(self, rng):
        self.rng = rng
        self.objects = []
        self._ids = set()

    def add(self, obj_type, name, x, y, width, height, properties=None):
        properties = dict(properties or {})
        obj_id = generate_id(self.rng)
        while obj_id in self._ids:
            obj_id = generate_id(self.rng)
        self._ids.add(obj_id)

        obj = GameObject(id=obj_id, type=obj_type, name=name, x=x, y=y,
                         width=width, height=height, properties=properties)
        # Store the resolved color so the object keeps it even if its
        # properties are edited later.
        self.objects.append(replace(obj, color=resolve_object_color(obj)))


def _empty_scene(scene_id, name='Main Scene', background_color=DEFAULT_BACKGROUND_COLOR, objects=()):
    return Scene(
        id=scene_id,
        name=name,
        width=1024,
        height=576,
        background_color=background_color,
        objects=tuple(objects),
        layers=('background', 'objects', 'ui'),
    )


def create_platformer_scene(scene_id, rng):
    b = _SceneBuilder(rng)
    b.add('platform', 'Ground', 0, 480, 1024, 96, {'color': '#10b981'})
    b.add('platform', 'Platform 1', 200, 380, 150, 32, {'color': '#10b981'})
    b.add('platform', 'Platform 2', 450, 280, 150, 32, {'color': '#10b981'})
    b.add('platform', 'Platform 3', 700, 180, 150, 32, {'color': '#10b981'})
    b.add('player', 'Player', 100, 400, 32, 48,
          {'color': '#3b82f6', 'speed': 200, 'jumpPower': 400, 'health': 100})
    b.add('collectible', 'Coin 1', 275, 340, 24, 24, {'color': '#fbbf24', 'points': 10, 'type': 'coin'})
    b.add('collectible', 'Coin 2', 525, 240, 24, 24, {'color': '#fbbf24', 'points': 10, 'type': 'coin'})
    b.add('enemy', 'Goomba', 600, 432, 32, 32, {'color': '#ef4444', 'health': 50, 'speed': 50, 'damage': 25})
    return _empty_scene(scene_id, 'Platformer Level', objects=b.objects)


def create_rpg_scene(scene_id, rng):
    b = _SceneBuilder(rng)
    b.add('player', 'Hero', 512, 288, 32, 32,
          {'color': '#3b82f6', 'speed': 150, 'health': 100, 'mana': 50, 'level': 1})
    b.add('enemy', 'Villager', 200, 200, 32, 32,
          {'color': '#10b981', 'health': 100, 'type': 'npc', 'dialogue': 'Welcome to our village!'})
    b.add('platform', 'Tree 1', 100, 100, 48, 64, {'color': '#166534'})
    b.add('platform', 'Tree 2', 300, 150, 48, 64, {'color': '#166534'})
    b.add('platform', 'Rock', 450, 400, 64, 48, {'color': '#6b7280'})
    b.add('collectible', 'Potion', 600, 300, 24, 24, {'color': '#ec4899', 'type': 'health_potion', 'healing': 50})
    return _empty_scene(scene_id, 'RPG World', '#166534', b.objects)


def create_puzzle_scene(scene_id, rng):
    """An 8x6 grid of 60-unit tiles with random colors."""
    b = _SceneBuilder(rng)
    tile_size, start_x, start_y = 64, 128, 64
    for y in range(6):
        for x in range(8):
            b.add('collectible', f'Tile {x}-{y}',
                  start_x + x * tile_size, start_y + y * tile_size, tile_size - 4, tile_size - 4,
                  {'color': rng.choice(_PUZZLE_COLORS), 'type': 'puzzle_tile', 'gridX': x, 'gridY': y})
    return _empty_scene(scene_id, 'Puzzle Grid', '#1e1b4b', b.objects)


def create_shooter_scene(scene_id, rng):
    b = _SceneBuilder(rng)
    b.add('player', 'Player Ship', 100, 288, 48, 32,
          {'color': '#3b82f6', 'speed': 250, 'health': 100, 'fireRate': 0.5, 'weaponType': 'laser'})
    b.add('enemy', 'Enemy 1', 600, 150, 32, 24, {'color': '#ef4444', 'health': 30, 'speed': 100, 'fireRate': 1.0})
    b.add('enemy', 'Enemy 2', 700, 300, 32, 24, {'color': '#ef4444', 'health': 30, 'speed': 120, 'fireRate': 0.8})
    b.add('enemy', 'Boss Ship', 800, 200, 64, 48,
          {'color': '#7c2d12', 'health': 200, 'speed': 50, 'fireRate': 2.0, 'type': 'boss'})
    b.add('collectible', 'Shield Boost', 400, 100, 24, 24, {'color': '#06b6d4', 'type': 'shield', 'duration': 10000})
    b.add('collectible', 'Weapon Upgrade', 300, 450, 24, 24,
          {'color': '#f59e0b', 'type': 'weapon_upgrade', 'upgradeLevel': 1})
    return _empty_scene(scene_id, 'Space Battlefield', '#0f172a', b.objects)


SCENE_BUILDERS = {
    'platformer': create_platformer_scene,
    'rpg': create_rpg_scene,
    'puzzle': create_puzzle_scene,
    'shooter': create_shooter_scene,
}


def normalize_template_name(template_name):
    """'2D Platformer-game ' style gallery names -> 'platformer' style keys."""
    name = (template_name or '').strip().lower().replace(' ', '-')
    if name.endswith('-game'):
        name = name[:-len('-game')]
    for known in TEMPLATE_NAMES:
        if name == known or name.endswith('-' + known):
            return known
    return name


def generate_project(template_name, rng=None, now=None):
    """
    Builds a fresh project for a named template.

    Unknown names produce a platformer project with one empty 'Main Scene'.
    The project's active scene is always the generated scene.
    """
    rng = rng or random.Random()
    now = now or utc_timestamp()
    key = normalize_template_name(template_name)
    builder = SCENE_BUILDERS.get(key)

    project_id = generate_id(rng)
    scene_id = generate_id(rng)
    scene = builder(scene_id, rng) if builder else _empty_scene(scene_id)
    project_type = key if builder else 'platformer'
    title = project_type if builder else (key or project_type)

    return Project(
        id=project_id,
        name=f"New {title.replace('-', ' ').title()} Game",
        description=f"A new {title} game",
        type=project_type,
        created_at=now,
        last_modified=now,
        scenes=(scene,),
        active_scene_id=scene_id,
        assets=(),
        settings=Settings(),
    )
