from dataclasses import replace

import pytest

from state import GameState
from utils.actions import AddObject, SetPan, SetZoom, UpdateProject
from utils.canvas_controller import CanvasController, Dragging, Idle
from utils.reducer import apply_action


def run(state, actions):
    for action in actions:
        state = apply_action(state, action)
    return state


@pytest.fixture
def scene_state(loaded_state, platform):
    return apply_action(loaded_state, AddObject("scene-1", platform))


class TestDragging:
    def test_drag_moves_object_by_grab_offset(self, scene_state):
        controller = CanvasController()

        state = run(scene_state, controller.pointer_down(scene_state, (10, 490)))
        assert state.editor.selected_object_id == "ground"
        assert controller.mode == Dragging("scene-1", "ground", (10, 10))

        state = run(state, controller.pointer_move(state, (10, 450)))
        ground = state.active_scene.find_object("ground")
        assert (ground.x, ground.y) == (0, 440)

        assert controller.pointer_up(state, (10, 450)) == ()
        assert controller.mode == Idle()
        assert state.active_scene.find_object("ground").y == 440

    def test_pointer_down_on_empty_space_clears_selection(self, scene_state):
        controller = CanvasController()
        state = run(scene_state, controller.pointer_down(scene_state, (10, 490)))
        state = run(state, controller.pointer_down(state, (500, 100)))
        assert state.editor.selected_object_id is None
        assert not controller.is_dragging

    def test_move_while_idle_emits_nothing(self, scene_state):
        assert CanvasController().pointer_move(scene_state, (10, 10)) == ()

    def test_pointer_leave_ends_drag(self, scene_state):
        controller = CanvasController()
        state = run(scene_state, controller.pointer_down(scene_state, (10, 490)))
        controller.pointer_leave(state)
        assert controller.mode == Idle()
        assert controller.pointer_move(state, (100, 100)) == ()

    def test_snap_keeps_grid_multiples(self, scene_state):
        settings = replace(scene_state.current_project.settings, snap_to_grid=True, grid_size=32)
        state = apply_action(scene_state, UpdateProject({"settings": settings}))
        controller = CanvasController()
        state = run(state, controller.pointer_down(state, (10, 490)))
        for point in [(37, 451), (101, 333), (250.5, 17.25), (-13, 600)]:
            state = run(state, controller.pointer_move(state, point))
            ground = state.active_scene.find_object("ground")
            assert ground.x % 32 == 0
            assert ground.y % 32 == 0

    def test_drag_respects_zoom_and_pan(self, scene_state):
        state = run(scene_state, [SetZoom(2.0), SetPan(10, 0)])
        controller = CanvasController()
        # world (10, 490) -> screen ((10 + 10) * 2, 490 * 2)
        state = run(state, controller.pointer_down(state, (40, 980)))
        assert state.editor.selected_object_id == "ground"
        state = run(state, controller.pointer_move(state, (60, 900)))
        ground = state.active_scene.find_object("ground")
        assert (ground.x, ground.y) == (10, 440)


class TestWheel:
    def test_zoom_saturates_at_max(self, scene_state):
        controller = CanvasController()
        state = scene_state
        for _ in range(100):
            state = run(state, controller.wheel(state, 1))
        assert state.editor.zoom == 3.0

    def test_zoom_saturates_at_min(self, scene_state):
        controller = CanvasController()
        state = scene_state
        for _ in range(100):
            state = run(state, controller.wheel(state, -1))
        assert state.editor.zoom == 0.1

    def test_custom_step_keeps_reducer_bounds(self, scene_state):
        controller = CanvasController(zoom_step=0.7)
        state = scene_state
        for _ in range(10):
            state = run(state, controller.wheel(state, 1))
        assert state.editor.zoom == 3.0
        assert controller.wheel(state, 1) == (SetZoom(3.0),)

    def test_zero_direction_is_ignored(self, scene_state):
        assert CanvasController().wheel(scene_state, 0) == ()

    def test_wheel_does_not_change_mode(self, scene_state):
        controller = CanvasController()
        state = run(scene_state, controller.pointer_down(scene_state, (10, 490)))
        controller.wheel(state, 1)
        assert controller.is_dragging


def test_no_scene_no_actions():
    controller = CanvasController()
    assert controller.pointer_down(GameState(), (0, 0)) == ()
    assert controller.mode == Idle()
