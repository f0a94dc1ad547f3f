"""
Tests for the reducer: every action returns a new state, leaves its input
untouched, and treats references to missing things as no-ops.
"""
from dataclasses import replace

import pytest

from state import Asset, GameState, Scene
from utils.actions import (
    AddAsset,
    AddObject,
    AddProject,
    DeleteAsset,
    DeleteObject,
    DeleteProject,
    SelectObject,
    SetError,
    SetLoading,
    SetPan,
    SetProject,
    SetProjects,
    SetTool,
    SetZoom,
    ToggleColliders,
    ToggleGrid,
    TogglePlay,
    UpdateObject,
    UpdateProject,
)
from utils.reducer import apply_action, initial_state

NOW = "2024-06-01T12:00:00+00:00"


@pytest.fixture
def state_with_platform(loaded_state, platform):
    return apply_action(loaded_state, AddObject("scene-1", platform), now=NOW)


class TestObjects:
    def test_add_object_appends_and_touches_project(self, loaded_state, platform):
        state = apply_action(loaded_state, AddObject("scene-1", platform), now=NOW)
        assert state.active_scene.objects == (platform,)
        assert state.current_project.last_modified == NOW
        assert loaded_state.active_scene.objects == ()

    def test_add_object_to_unknown_scene_is_noop(self, loaded_state, platform):
        assert apply_action(loaded_state, AddObject("nope", platform)) is loaded_state

    def test_update_object_merges_changes(self, state_with_platform):
        state = apply_action(state_with_platform,
                             UpdateObject("scene-1", "ground", {"x": 10, "name": "Floor"}))
        obj = state.active_scene.find_object("ground")
        assert (obj.x, obj.y, obj.name) == (10, 480, "Floor")
        assert state_with_platform.active_scene.find_object("ground").x == 0

    def test_update_object_ignores_id(self, state_with_platform):
        state = apply_action(state_with_platform, UpdateObject("scene-1", "ground", {"id": "other", "x": 5}))
        assert state.active_scene.find_object("ground").x == 5
        assert state.active_scene.find_object("other") is None

    @pytest.mark.parametrize("scene_id,object_id", [("missing", "ground"), ("scene-1", "missing")])
    def test_update_unknown_reference_returns_equal_state(self, state_with_platform, scene_id, object_id):
        result = apply_action(state_with_platform, UpdateObject(scene_id, object_id, {"x": 99}))
        assert result == state_with_platform
        assert result is state_with_platform

    def test_update_without_effect_keeps_state(self, state_with_platform):
        result = apply_action(state_with_platform, UpdateObject("scene-1", "ground", {"x": 0}))
        assert result is state_with_platform

    def test_update_unknown_field_raises(self, state_with_platform):
        with pytest.raises(TypeError):
            apply_action(state_with_platform, UpdateObject("scene-1", "ground", {"bogus": 1}))

    def test_update_negative_size_raises(self, state_with_platform):
        with pytest.raises(ValueError):
            apply_action(state_with_platform, UpdateObject("scene-1", "ground", {"width": -1}))

    def test_delete_selected_object_clears_selection(self, state_with_platform):
        state = apply_action(state_with_platform, SelectObject("ground"))
        state = apply_action(state, DeleteObject("scene-1", "ground"))
        assert state.active_scene.objects == ()
        assert state.editor.selected_object_id is None

    def test_delete_other_object_keeps_selection(self, state_with_platform, platform):
        other = replace(platform, id="other")
        state = apply_action(state_with_platform, AddObject("scene-1", other))
        state = apply_action(state, SelectObject("ground"))
        state = apply_action(state, DeleteObject("scene-1", "other"))
        assert state.editor.selected_object_id == "ground"

    def test_delete_unknown_object_is_noop(self, state_with_platform):
        assert apply_action(state_with_platform, DeleteObject("scene-1", "missing")) is state_with_platform

    def test_delete_from_wrong_scene_still_clears_matching_selection(self, state_with_platform):
        state = apply_action(state_with_platform, SelectObject("ground"))
        state = apply_action(state, DeleteObject("other-scene", "ground"))
        assert state.editor.selected_object_id is None
        assert state.active_scene.find_object("ground") is not None
        assert state.current_project is state_with_platform.current_project

    def test_add_object_with_taken_id_is_noop(self, state_with_platform, platform):
        duplicate = replace(platform, name="Second Ground", y=7)
        result = apply_action(state_with_platform, AddObject("scene-1", duplicate))
        assert result is state_with_platform

        result = apply_action(result, UpdateObject("scene-1", "ground", {"y": 7}))
        assert [o.y for o in result.active_scene.objects] == [7]

    def test_update_object_type_outside_enum_raises(self, state_with_platform):
        with pytest.raises(ValueError):
            apply_action(state_with_platform, UpdateObject("scene-1", "ground", {"type": "spaceship"}))

    def test_update_object_non_numeric_position_raises(self, state_with_platform):
        with pytest.raises(TypeError):
            apply_action(state_with_platform, UpdateObject("scene-1", "ground", {"x": "left"}))


class TestSelection:
    def test_select_and_clear(self, state_with_platform):
        state = apply_action(state_with_platform, SelectObject("ground"))
        assert state.editor.selected_object_id == "ground"
        state = apply_action(state, SelectObject(None))
        assert state.editor.selected_object_id is None

    def test_select_unknown_object_is_noop(self, state_with_platform):
        assert apply_action(state_with_platform, SelectObject("missing")) is state_with_platform

    def test_set_project_drops_stale_selection(self, state_with_platform, empty_project):
        state = apply_action(state_with_platform, SelectObject("ground"))
        state = apply_action(state, SetProject(empty_project))
        assert state.editor.selected_object_id is None


class TestProjects:
    def test_update_project_keeps_id_and_refreshes_timestamp(self, loaded_state):
        state = apply_action(loaded_state, UpdateProject({"id": "x", "name": "Renamed"}), now=NOW)
        assert state.current_project.id == "project-1"
        assert state.current_project.name == "Renamed"
        assert state.current_project.last_modified == NOW

    def test_update_project_without_project_is_noop(self):
        state = GameState()
        assert apply_action(state, UpdateProject({"name": "x"})) is state

    def test_project_list_actions(self, empty_project):
        state = apply_action(GameState(), AddProject(empty_project))
        assert state.projects == (empty_project,)
        state = apply_action(state, DeleteProject("unknown"))
        assert state.projects == (empty_project,)
        state = apply_action(state, SetProjects([]))
        assert state.projects == ()

    def test_delete_current_project_clears_it(self, loaded_state, empty_project):
        state = apply_action(loaded_state, AddProject(empty_project))
        state = apply_action(state, DeleteProject("project-1"))
        assert state.current_project is None
        assert state.projects == ()

    def test_delete_current_project_clears_selection(self, state_with_platform):
        state = apply_action(state_with_platform, SelectObject("ground"))
        state = apply_action(state, DeleteProject("project-1"))
        assert state.current_project is None
        assert state.editor.selected_object_id is None

    def test_switching_active_scene_clears_selection(self, state_with_platform):
        second = Scene(id="scene-2", name="Second", width=640, height=480)
        state = apply_action(state_with_platform, SelectObject("ground"))
        state = apply_action(state, UpdateProject({"scenes": state.current_project.scenes + (second,)}))
        assert state.editor.selected_object_id == "ground"

        state = apply_action(state, UpdateProject({"active_scene_id": "scene-2"}))
        assert state.active_scene.id == "scene-2"
        assert state.editor.selected_object_id is None

    def test_replacing_scenes_clears_selection(self, state_with_platform, empty_scene):
        state = apply_action(state_with_platform, SelectObject("ground"))
        state = apply_action(state, UpdateProject({"scenes": [empty_scene]}))
        assert state.editor.selected_object_id is None

    def test_project_type_outside_enum_raises(self, loaded_state):
        with pytest.raises(ValueError):
            apply_action(loaded_state, UpdateProject({"type": "arcade"}))


class TestEditorView:
    def test_zoom_is_clamped(self, loaded_state):
        assert apply_action(loaded_state, SetZoom(10)).editor.zoom == 3.0
        assert apply_action(loaded_state, SetZoom(0)).editor.zoom == 0.1

    def test_pan_and_toggles(self, loaded_state):
        state = apply_action(loaded_state, SetPan(12, -4))
        assert (state.editor.pan_x, state.editor.pan_y) == (12, -4)
        state = apply_action(state, ToggleGrid())
        state = apply_action(state, ToggleColliders())
        state = apply_action(state, TogglePlay())
        assert not state.editor.show_grid
        assert state.editor.show_colliders
        assert state.editor.is_playing

    def test_unknown_tool_is_ignored(self, loaded_state):
        assert apply_action(loaded_state, SetTool("move")).editor.tool == "move"
        assert apply_action(loaded_state, SetTool("lasso")) is loaded_state

    def test_view_changes_do_not_touch_project(self, loaded_state):
        state = apply_action(loaded_state, SetZoom(2.0), now=NOW)
        assert state.current_project is loaded_state.current_project


class TestSessionFlags:
    def test_assets(self):
        asset = Asset(id="a1", name="Hero", type="sprite", url="hero.png")
        state = apply_action(initial_state(), AddAsset(asset))
        assert state.assets == (asset,)
        assert apply_action(state, DeleteAsset("a1")).assets == ()
        assert apply_action(state, DeleteAsset("zz")) is state

    def test_loading_and_error(self):
        state = apply_action(initial_state(), SetLoading(True))
        state = apply_action(state, SetError("boom"))
        assert state.is_loading and state.error == "boom"
        assert apply_action(state, SetError()).error is None


def test_unknown_action_returns_same_state(loaded_state):
    class Unknown:
        pass

    assert apply_action(loaded_state, Unknown()) is loaded_state
