"""JSON layout of stored projects.

Keys are camelCase so the files stay readable by the browser build of the
editor, which keeps the same records in local storage.
"""
from state import (
    ASSET_TYPES,
    OBJECT_TYPES,
    PROJECT_TYPES,
    Asset,
    GameObject,
    Project,
    Scene,
    Settings,
    validate_property_value,
)
from utils.errors import ProjectDecodeError, ProjectStorageError

FORMAT = "scene-editor.projects"
VERSION_LATEST = 1


def encode_object(obj):
    data = {
        "id": obj.id,
        "type": obj.type,
        "name": obj.name,
        "x": obj.x,
        "y": obj.y,
        "width": obj.width,
        "height": obj.height,
        "properties": validate_property_value(dict(obj.properties), f"{obj.id}.properties"),
        "visible": obj.visible,
        "locked": obj.locked,
    }
    if obj.sprite is not None:
        data["sprite"] = obj.sprite
    if obj.color is not None:
        data["color"] = obj.color
    return data


def encode_scene(scene):
    seen = set()
    for obj in scene.objects:
        if obj.id in seen:
            raise ProjectStorageError(f"Scene '{scene.id}' has duplicate object id '{obj.id}'")
        seen.add(obj.id)
    return {
        "id": scene.id,
        "name": scene.name,
        "width": scene.width,
        "height": scene.height,
        "backgroundColor": scene.background_color,
        "objects": [encode_object(o) for o in scene.objects],
        "layers": list(scene.layers),
    }


def encode_asset(asset):
    data = {
        "id": asset.id,
        "name": asset.name,
        "type": asset.type,
        "url": asset.url,
        "properties": validate_property_value(dict(asset.properties), f"{asset.id}.properties"),
    }
    if asset.width is not None:
        data["width"] = asset.width
    if asset.height is not None:
        data["height"] = asset.height
    return data


def encode_settings(settings):
    return {
        "canvasWidth": settings.canvas_width,
        "canvasHeight": settings.canvas_height,
        "gravity": settings.gravity,
        "gridSize": settings.grid_size,
        "showGrid": settings.show_grid,
        "snapToGrid": settings.snap_to_grid,
        "backgroundColor": settings.background_color,
    }


def encode_project(project):
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "type": project.type,
        "createdAt": project.created_at,
        "lastModified": project.last_modified,
        "scenes": [encode_scene(s) for s in project.scenes],
        "activeSceneId": project.active_scene_id,
        "assets": [encode_asset(a) for a in project.assets],
        "settings": encode_settings(project.settings),
    }


def encode_projects(projects):
    """Encodes projects into the stored document.

    The document is decoded again before it is returned, so anything the
    reader would reject fails here with ProjectStorageError instead of
    making the whole file unreadable.
    """
    try:
        payload = {
            "format": FORMAT,
            "version": VERSION_LATEST,
            "projects": [encode_project(p) for p in projects],
        }
    except (TypeError, ValueError) as e:
        raise ProjectStorageError(f"Failed to encode projects: {e}") from e
    try:
        decode_projects(payload)
    except ProjectDecodeError as e:
        raise ProjectStorageError(f"Refusing to store projects that would not load back: {e}") from e
    return payload


# --- Decoding ------------------------------------------------------------

def _require(data, key, types, where):
    if key not in data:
        raise ProjectDecodeError(f"{where}.{key} is missing")
    value = data[key]
    if not isinstance(value, types) or (isinstance(value, bool) and bool not in _as_tuple(types)):
        raise ProjectDecodeError(f"{where}.{key} has invalid type {type(value).__name__}")
    return value


def _optional(data, key, types, where, default=None):
    if data.get(key) is None:
        return default
    return _require(data, key, types, where)


def _as_tuple(types):
    return types if isinstance(types, tuple) else (types,)


def _require_choice(data, key, choices, where):
    value = _require(data, key, str, where)
    if value not in choices:
        raise ProjectDecodeError(f"{where}.{key} must be one of {', '.join(choices)}; got '{value}'")
    return value


def _require_list(data, key, where):
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ProjectDecodeError(f"{where}.{key} must be a list")
    return value


def _require_properties(data, where):
    props = data.get("properties", {})
    if not isinstance(props, dict):
        raise ProjectDecodeError(f"{where}.properties must be an object")
    try:
        return validate_property_value(props, f"{where}.properties")
    except TypeError as e:
        raise ProjectDecodeError(str(e)) from e


def decode_object(data, where):
    if not isinstance(data, dict):
        raise ProjectDecodeError(f"{where} must be an object")
    width = _require(data, "width", (int, float), where)
    height = _require(data, "height", (int, float), where)
    if width < 0 or height < 0:
        raise ProjectDecodeError(f"{where} has a negative size")
    return GameObject(
        id=_require(data, "id", str, where),
        type=_require_choice(data, "type", OBJECT_TYPES, where),
        name=_require(data, "name", str, where),
        x=_require(data, "x", (int, float), where),
        y=_require(data, "y", (int, float), where),
        width=width,
        height=height,
        properties=_require_properties(data, where),
        sprite=_optional(data, "sprite", str, where),
        color=_optional(data, "color", str, where),
        visible=_optional(data, "visible", bool, where, True),
        locked=_optional(data, "locked", bool, where, False),
    )


def decode_scene(data, where):
    if not isinstance(data, dict):
        raise ProjectDecodeError(f"{where} must be an object")
    objects = tuple(
        decode_object(o, f"{where}.objects[{i}]")
        for i, o in enumerate(_require_list(data, "objects", where))
    )
    seen = set()
    for obj in objects:
        if obj.id in seen:
            raise ProjectDecodeError(f"{where} has duplicate object id '{obj.id}'")
        seen.add(obj.id)

    layers = _require_list(data, "layers", where)
    if not all(isinstance(layer, str) for layer in layers):
        raise ProjectDecodeError(f"{where}.layers must be a list of strings")

    return Scene(
        id=_require(data, "id", str, where),
        name=_require(data, "name", str, where),
        width=_require(data, "width", (int, float), where),
        height=_require(data, "height", (int, float), where),
        background_color=_require(data, "backgroundColor", str, where),
        objects=objects,
        layers=tuple(layers),
    )


def decode_asset(data, where):
    if not isinstance(data, dict):
        raise ProjectDecodeError(f"{where} must be an object")
    return Asset(
        id=_require(data, "id", str, where),
        name=_require(data, "name", str, where),
        type=_require_choice(data, "type", ASSET_TYPES, where),
        url=_require(data, "url", str, where),
        width=_optional(data, "width", int, where),
        height=_optional(data, "height", int, where),
        properties=_require_properties(data, where),
    )


def decode_settings(data, where):
    if not isinstance(data, dict):
        raise ProjectDecodeError(f"{where} must be an object")
    defaults = Settings()
    return Settings(
        canvas_width=_optional(data, "canvasWidth", int, where, defaults.canvas_width),
        canvas_height=_optional(data, "canvasHeight", int, where, defaults.canvas_height),
        gravity=_optional(data, "gravity", (int, float), where, defaults.gravity),
        grid_size=_optional(data, "gridSize", int, where, defaults.grid_size),
        show_grid=_optional(data, "showGrid", bool, where, defaults.show_grid),
        snap_to_grid=_optional(data, "snapToGrid", bool, where, defaults.snap_to_grid),
        background_color=_optional(data, "backgroundColor", str, where, defaults.background_color),
    )


def decode_project(data, where="project"):
    if not isinstance(data, dict):
        raise ProjectDecodeError(f"{where} must be an object")
    scenes = tuple(
        decode_scene(s, f"{where}.scenes[{i}]")
        for i, s in enumerate(_require_list(data, "scenes", where))
    )
    assets = tuple(
        decode_asset(a, f"{where}.assets[{i}]")
        for i, a in enumerate(_require_list(data, "assets", where))
    )
    return Project(
        id=_require(data, "id", str, where),
        name=_require(data, "name", str, where),
        description=_optional(data, "description", str, where, ""),
        type=_require_choice(data, "type", PROJECT_TYPES, where),
        created_at=_require(data, "createdAt", str, where),
        last_modified=_require(data, "lastModified", str, where),
        scenes=scenes,
        active_scene_id=_require(data, "activeSceneId", str, where),
        assets=assets,
        settings=decode_settings(data.get("settings", {}), f"{where}.settings"),
    )


def decode_projects(obj):
    """Decodes a stored document into a list of projects.

    Accepts the versioned document written by encode_projects and the
    bare list of projects used by the browser build.
    """
    if isinstance(obj, list):
        raw_projects = obj
    elif isinstance(obj, dict):
        if obj.get("format") != FORMAT:
            raise ProjectDecodeError("Invalid projects format marker.")
        if obj.get("version") != VERSION_LATEST:
            raise ProjectDecodeError(f"Unsupported projects version: {obj.get('version')!r}")
        raw_projects = obj.get("projects", [])
        if not isinstance(raw_projects, list):
            raise ProjectDecodeError("projects must be a list.")
    else:
        raise ProjectDecodeError("Stored projects must be a JSON object or list.")

    return [decode_project(p, f"projects[{i}]") for i, p in enumerate(raw_projects)]
