import math
import os

import numpy as np
import pygame
from PIL import Image

from state import resolve_object_color
from utils.font_utils import LABEL_FONT_SIZE, get_label_font
from utils.geometry_utils import world_to_screen

CLEAR_COLOR = (31, 41, 55)
GRID_COLOR = (255, 255, 255, 26)
LABEL_COLOR = (255, 255, 255)
LABEL_ALPHA = 204
SELECTION_COLOR = (96, 165, 250)
COLLIDER_COLOR = (239, 68, 68)

SELECTION_DASH = (5, 5)
COLLIDER_DASH = (3, 3)
SELECTION_MARGIN = 2
SELECTION_LINE_WIDTH = 2
HANDLE_SIZE = 6


def create_frame(width, height):
    """Creates an empty frame buffer for render_scene."""
    return pygame.Surface((int(width), int(height)))


def parse_color(value, fallback=CLEAR_COLOR):
    """Converts a '#rrggbb' style string to a pygame.Color, or `fallback`."""
    try:
        return pygame.Color(value)
    except (ValueError, TypeError):
        return pygame.Color(*fallback)


def _screen_box(x, y, width, height, zoom, pan):
    """World box -> integer screen rect. Edges are rounded independently so
    adjacent boxes never leave a gap."""
    x1, y1 = world_to_screen((x, y), zoom, pan)
    x2, y2 = world_to_screen((x + width, y + height), zoom, pan)
    left, top = round(x1), round(y1)
    return pygame.Rect(left, top, round(x2) - left, round(y2) - top)


def _scaled(length, zoom):
    return max(1, int(round(length * zoom)))


def draw_dashed_line(surface, color, start, end, dash, width=1):
    """Draws a dashed segment. `dash` is (on, off) in pixels."""
    x1, y1 = start
    x2, y2 = end
    length = math.hypot(x2 - x1, y2 - y1)
    if length == 0:
        return
    on, off = dash
    step = max(1, on + off)
    dx, dy = (x2 - x1) / length, (y2 - y1) / length

    pos = 0.0
    while pos < length:
        seg_end = min(pos + on, length)
        pygame.draw.line(
            surface, color,
            (x1 + dx * pos, y1 + dy * pos),
            (x1 + dx * seg_end, y1 + dy * seg_end),
            width,
        )
        pos += step


def draw_dashed_rect(surface, color, rect, dash, width=1):
    """Dashed outline of a pygame.Rect, clockwise from the top-left corner."""
    corners = [rect.topleft, rect.topright, rect.bottomright, rect.bottomleft]
    for i, start in enumerate(corners):
        draw_dashed_line(surface, color, start, corners[(i + 1) % 4], dash, width)


def draw_grid(surface, scene, grid_size, zoom, pan):
    """Vertical and horizontal lines every `grid_size` units across the scene."""
    if grid_size <= 0:
        return
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)

    x = 0
    while x <= scene.width:
        top = world_to_screen((x, 0), zoom, pan)
        bottom = world_to_screen((x, scene.height), zoom, pan)
        pygame.draw.line(overlay, GRID_COLOR, top, bottom, 1)
        x += grid_size

    y = 0
    while y <= scene.height:
        left = world_to_screen((0, y), zoom, pan)
        right = world_to_screen((scene.width, y), zoom, pan)
        pygame.draw.line(overlay, GRID_COLOR, left, right, 1)
        y += grid_size

    surface.blit(overlay, (0, 0))


def draw_game_object(surface, obj, is_selected, zoom, pan):
    """Filled rectangle with its type label; selection outline and handles."""
    box = _screen_box(obj.x, obj.y, obj.width, obj.height, zoom, pan)
    pygame.draw.rect(surface, parse_color(resolve_object_color(obj)), box)

    font = get_label_font(LABEL_FONT_SIZE * zoom)
    label = font.render(obj.type.upper(), True, LABEL_COLOR)
    label.set_alpha(LABEL_ALPHA)
    surface.blit(label, label.get_rect(center=box.center))

    if not is_selected:
        return

    margin = SELECTION_MARGIN
    outline = _screen_box(obj.x - margin, obj.y - margin,
                          obj.width + margin * 2, obj.height + margin * 2, zoom, pan)
    dash = (_scaled(SELECTION_DASH[0], zoom), _scaled(SELECTION_DASH[1], zoom))
    draw_dashed_rect(surface, SELECTION_COLOR, outline, dash, _scaled(SELECTION_LINE_WIDTH, zoom))

    half = HANDLE_SIZE / 2
    for cx, cy in ((obj.x, obj.y), (obj.x + obj.width, obj.y),
                   (obj.x, obj.y + obj.height), (obj.x + obj.width, obj.y + obj.height)):
        handle = _screen_box(cx - half, cy - half, HANDLE_SIZE, HANDLE_SIZE, zoom, pan)
        pygame.draw.rect(surface, SELECTION_COLOR, handle)


def draw_collision_box(surface, obj, zoom, pan):
    box = _screen_box(obj.x, obj.y, obj.width, obj.height, zoom, pan)
    dash = (_scaled(COLLIDER_DASH[0], zoom), _scaled(COLLIDER_DASH[1], zoom))
    draw_dashed_rect(surface, COLLIDER_COLOR, box, dash, _scaled(1, zoom))


def render_scene(surface, scene, view, grid_size, clear_color=CLEAR_COLOR):
    """
    Draws one frame of `scene` as seen through `view` onto `surface`.

    The world transform is scale-by-zoom then translate-by-pan, the same
    one geometry_utils.screen_to_world inverts. Reads its inputs only, so
    identical inputs always produce identical pixels.
    """
    zoom = view.zoom
    pan = (view.pan_x, view.pan_y)

    surface.fill(clear_color)

    background = _screen_box(0, 0, scene.width, scene.height, zoom, pan)
    pygame.draw.rect(surface, parse_color(scene.background_color), background)

    if view.show_grid:
        draw_grid(surface, scene, grid_size, zoom, pan)

    for obj in scene.objects:
        if not obj.visible:
            continue
        draw_game_object(surface, obj, obj.id == view.selected_object_id, zoom, pan)

    if view.show_colliders:
        for obj in scene.objects:
            if obj.visible:
                draw_collision_box(surface, obj, zoom, pan)

    return surface


def frame_to_array(surface):
    """Frame pixels as a (height, width, 3) uint8 array."""
    return np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)).astype(np.uint8)


def export_frame_png(surface, path):
    """Saves a rendered frame as PNG and returns the written path."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    Image.fromarray(frame_to_array(surface), 'RGB').save(path)
    return path
