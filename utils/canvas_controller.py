from dataclasses import dataclass
from typing import Tuple

from utils.actions import SelectObject, SetZoom, UpdateObject
from utils.collision_utils import object_at
from utils.geometry_utils import clamp_zoom, screen_to_world, snap_point

ZOOM_STEP = 0.1


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    scene_id: str
    object_id: str
    grab_offset: Tuple[float, float]


class CanvasController:
    """Turns pointer and wheel input on the canvas into edit actions.

    Two modes: Idle, and Dragging an object picked on pointer-down. Every
    handler takes the current GameState plus screen coordinates and returns
    the actions to dispatch, in order. The controller never touches the
    state itself; it only remembers its own mode.
    """

    def __init__(self, zoom_step=ZOOM_STEP):
        self.zoom_step = zoom_step
        self.mode = Idle()

    @property
    def is_dragging(self):
        return isinstance(self.mode, Dragging)

    def _to_world(self, state, screen_pos):
        view = state.editor
        return screen_to_world(screen_pos, view.zoom, (view.pan_x, view.pan_y))

    def pointer_down(self, state, screen_pos):
        scene = state.active_scene
        if scene is None:
            return ()

        wx, wy = self._to_world(state, screen_pos)
        hit = object_at((wx, wy), scene.objects)
        if hit is None:
            self.mode = Idle()
            return (SelectObject(None),)

        self.mode = Dragging(scene.id, hit.id, (wx - hit.x, wy - hit.y))
        return (SelectObject(hit.id),)

    def pointer_move(self, state, screen_pos):
        if not isinstance(self.mode, Dragging) or state.current_project is None:
            return ()

        wx, wy = self._to_world(state, screen_pos)
        grab_x, grab_y = self.mode.grab_offset
        x, y = wx - grab_x, wy - grab_y

        settings = state.current_project.settings
        if settings.snap_to_grid:
            x, y = snap_point((x, y), settings.grid_size)

        return (UpdateObject(self.mode.scene_id, self.mode.object_id, {"x": x, "y": y}),)

    def pointer_up(self, state=None, screen_pos=None):
        self.mode = Idle()
        return ()

    def pointer_leave(self, state=None):
        self.mode = Idle()
        return ()

    def wheel(self, state, direction):
        """`direction` > 0 scrolls up and zooms in, < 0 zooms out.

        The step is fixed regardless of scroll magnitude. Zoom stays within
        the same [MIN_ZOOM, MAX_ZOOM] range the reducer enforces.
        """
        if direction == 0:
            return ()
        delta = self.zoom_step if direction > 0 else -self.zoom_step
        new_zoom = clamp_zoom(state.editor.zoom + delta)
        return (SetZoom(new_zoom),)
