from dataclasses import replace

from state import EDITOR_TOOLS, GameState, utc_timestamp
from utils import actions
from utils.geometry_utils import clamp_zoom

# Keys a shallow merge must never overwrite.
_IMMUTABLE_OBJECT_KEYS = {"id"}
_IMMUTABLE_PROJECT_KEYS = {"id", "last_modified"}
_SEQUENCE_PROJECT_KEYS = {"scenes", "assets"}


def apply_action(state, action, now=None):
    """
    Returns the state that follows `state` after `action`.

    The input is never modified. Actions that reference a missing
    project, scene or object return `state` itself, as do action types the
    reducer does not know. `now` overrides the timestamp written into
    `last_modified`.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action, now or utc_timestamp())


def _touch(project, now):
    return replace(project, last_modified=now)


def _replace_scene(project, scene):
    scenes = tuple(scene if s.id == scene.id else s for s in project.scenes)
    return replace(project, scenes=scenes)


# --- Projects ------------------------------------------------------------

def _prune_selection(editor, project):
    """Clears a selection that no longer names an object in the active scene."""
    if editor.selected_object_id is None:
        return editor
    scene = project.active_scene if project is not None else None
    if scene is None or scene.find_object(editor.selected_object_id) is None:
        return replace(editor, selected_object_id=None)
    return editor


def _set_project(state, action, now):
    editor = _prune_selection(state.editor, action.project)
    return replace(state, current_project=action.project, editor=editor)


def _update_project(state, action, now):
    if state.current_project is None:
        return state
    changes = {k: v for k, v in action.changes.items() if k not in _IMMUTABLE_PROJECT_KEYS}
    for key in _SEQUENCE_PROJECT_KEYS & changes.keys():
        changes[key] = tuple(changes[key])
    project = _touch(replace(state.current_project, **changes), now)
    return replace(state, current_project=project, editor=_prune_selection(state.editor, project))


def _add_project(state, action, now):
    return replace(state, projects=state.projects + (action.project,))


def _delete_project(state, action, now):
    projects = tuple(p for p in state.projects if p.id != action.project_id)
    current = state.current_project
    if current is not None and current.id == action.project_id:
        current = None
    if len(projects) == len(state.projects) and current is state.current_project:
        return state
    return replace(state, projects=projects, current_project=current,
                   editor=_prune_selection(state.editor, current))


def _set_projects(state, action, now):
    return replace(state, projects=tuple(action.projects))


# --- Objects -------------------------------------------------------------

def _add_object(state, action, now):
    project = state.current_project
    if project is None:
        return state
    scene = project.find_scene(action.scene_id)
    # Object ids are unique within a scene; a second object with a taken id is dropped.
    if scene is None or scene.find_object(action.obj.id) is not None:
        return state
    scene = replace(scene, objects=scene.objects + (action.obj,))
    return replace(state, current_project=_touch(_replace_scene(project, scene), now))


def _update_object(state, action, now):
    project = state.current_project
    if project is None:
        return state
    scene = project.find_scene(action.scene_id)
    if scene is None:
        return state
    obj = scene.find_object(action.object_id)
    if obj is None:
        return state

    changes = {k: v for k, v in action.changes.items() if k not in _IMMUTABLE_OBJECT_KEYS}
    # Unknown field names raise TypeError and negative sizes raise ValueError
    # from here; property edits are never dropped silently.
    updated = replace(obj, **changes)
    if updated == obj:
        return state

    objects = tuple(updated if o.id == obj.id else o for o in scene.objects)
    scene = replace(scene, objects=objects)
    return replace(state, current_project=_touch(_replace_scene(project, scene), now))


def _delete_object(state, action, now):
    editor = state.editor
    if action.object_id is not None and editor.selected_object_id == action.object_id:
        editor = replace(editor, selected_object_id=None)

    project = state.current_project
    scene = project.find_scene(action.scene_id) if project is not None else None
    if scene is None or scene.find_object(action.object_id) is None:
        # Nothing to remove, but a selection naming that id is still dropped.
        return state if editor is state.editor else replace(state, editor=editor)

    scene = replace(scene, objects=tuple(o for o in scene.objects if o.id != action.object_id))
    return replace(
        state,
        current_project=_touch(_replace_scene(project, scene), now),
        editor=editor,
    )


# --- Editor view ---------------------------------------------------------

def _select_object(state, action, now):
    if action.object_id is not None:
        scene = state.active_scene
        if scene is None or scene.find_object(action.object_id) is None:
            return state
    if state.editor.selected_object_id == action.object_id:
        return state
    return replace(state, editor=replace(state.editor, selected_object_id=action.object_id))


def _set_tool(state, action, now):
    if action.tool not in EDITOR_TOOLS:
        return state
    return replace(state, editor=replace(state.editor, tool=action.tool))


def _set_zoom(state, action, now):
    return replace(state, editor=replace(state.editor, zoom=clamp_zoom(action.zoom)))


def _set_pan(state, action, now):
    return replace(state, editor=replace(state.editor, pan_x=action.x, pan_y=action.y))


def _toggle_grid(state, action, now):
    return replace(state, editor=replace(state.editor, show_grid=not state.editor.show_grid))


def _toggle_colliders(state, action, now):
    return replace(state, editor=replace(state.editor, show_colliders=not state.editor.show_colliders))


def _toggle_play(state, action, now):
    return replace(state, editor=replace(state.editor, is_playing=not state.editor.is_playing))


# --- Assets and session flags --------------------------------------------

def _add_asset(state, action, now):
    return replace(state, assets=state.assets + (action.asset,))


def _delete_asset(state, action, now):
    assets = tuple(a for a in state.assets if a.id != action.asset_id)
    if len(assets) == len(state.assets):
        return state
    return replace(state, assets=assets)


def _set_loading(state, action, now):
    return replace(state, is_loading=action.is_loading)


def _set_error(state, action, now):
    return replace(state, error=action.error)


_HANDLERS = {
    actions.SetProject: _set_project,
    actions.UpdateProject: _update_project,
    actions.AddProject: _add_project,
    actions.DeleteProject: _delete_project,
    actions.SetProjects: _set_projects,
    actions.AddObject: _add_object,
    actions.UpdateObject: _update_object,
    actions.DeleteObject: _delete_object,
    actions.SelectObject: _select_object,
    actions.SetTool: _set_tool,
    actions.SetZoom: _set_zoom,
    actions.SetPan: _set_pan,
    actions.ToggleGrid: _toggle_grid,
    actions.ToggleColliders: _toggle_colliders,
    actions.TogglePlay: _toggle_play,
    actions.AddAsset: _add_asset,
    actions.DeleteAsset: _delete_asset,
    actions.SetLoading: _set_loading,
    actions.SetError: _set_error,
}


def initial_state():
    return GameState()
