import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

OBJECT_TYPES = ("player", "enemy", "platform", "collectible", "background")
PROJECT_TYPES = ("platformer", "rpg", "puzzle", "shooter")
ASSET_TYPES = ("sprite", "sound", "background", "tileset")
EDITOR_TOOLS = ("select", "move", "draw", "erase")

DEFAULT_OBJECT_COLOR = "#3b82f6"
DEFAULT_BACKGROUND_COLOR = "#1e293b"

MIN_ZOOM = 0.1
MAX_ZOOM = 3.0

# Expected property keys per object type. Keys outside the table are still
# accepted; only the value types are closed (see validate_property_value).
OBJECT_PROPERTY_SCHEMA: Dict[str, Dict[str, type]] = {
    "player": {
        "color": str, "speed": float, "jumpPower": float, "health": int,
        "mana": int, "level": int, "fireRate": float, "weaponType": str,
    },
    "enemy": {
        "color": str, "health": int, "speed": float, "damage": int,
        "fireRate": float, "type": str, "dialogue": str,
    },
    "platform": {"color": str},
    "collectible": {
        "color": str, "points": int, "type": str, "healing": int,
        "gridX": int, "gridY": int, "duration": int, "upgradeLevel": int,
    },
    "background": {"color": str},
}


def validate_property_value(value: Any, path: str = "value") -> Any:
    """Check that `value` belongs to the closed property union.

    Allowed: int, float, str, bool, and dicts with str keys whose values are
    themselves allowed. Raises TypeError otherwise and returns the value
    unchanged on success.
    """
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        for key, nested in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{path} has a non-string key {key!r}")
            validate_property_value(nested, f"{path}.{key}")
        return value
    raise TypeError(f"{path} has unsupported type {type(value).__name__}")


def _check_choice(owner: str, field_name: str, value: Any, choices: Tuple[str, ...]) -> None:
    if value not in choices:
        raise ValueError(f"{owner} has {field_name} {value!r}; expected one of {', '.join(choices)}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class GameObject:
    """A placed rectangular entity inside a scene. Sizes are world units."""

    id: str
    type: str
    name: str
    x: float
    y: float
    width: float
    height: float
    properties: Dict[str, Any] = field(default_factory=dict)
    sprite: Optional[str] = None
    color: Optional[str] = None
    visible: bool = True
    locked: bool = False

    def __post_init__(self):
        _check_choice(f"Object '{self.id}'", "type", self.type, OBJECT_TYPES)
        for name in ("x", "y", "width", "height"):
            if not _is_number(getattr(self, name)):
                raise TypeError(f"Object '{self.id}' has a non-numeric {name}: {getattr(self, name)!r}")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Object '{self.id}' has a negative size ({self.width}x{self.height})")


@dataclass(frozen=True)
class Scene:
    """A named canvas. `objects` is in paint order, back to front."""

    id: str
    name: str
    width: float
    height: float
    background_color: str = DEFAULT_BACKGROUND_COLOR
    objects: Tuple[GameObject, ...] = ()
    layers: Tuple[str, ...] = ("background", "objects", "ui")

    def find_object(self, object_id: Optional[str]) -> Optional[GameObject]:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None


@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    type: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        _check_choice(f"Asset '{self.id}'", "type", self.type, ASSET_TYPES)


@dataclass(frozen=True)
class Settings:
    canvas_width: int = 1024
    canvas_height: int = 576
    gravity: float = 800
    grid_size: int = 32
    show_grid: bool = True
    snap_to_grid: bool = True
    background_color: str = DEFAULT_BACKGROUND_COLOR


@dataclass(frozen=True)
class Project:
    """Top-level persisted unit. Timestamps are ISO-8601 strings."""

    id: str
    name: str
    description: str
    type: str
    created_at: str
    last_modified: str
    scenes: Tuple[Scene, ...] = ()
    active_scene_id: str = ""
    assets: Tuple[Asset, ...] = ()
    settings: Settings = field(default_factory=Settings)

    def __post_init__(self):
        _check_choice(f"Project '{self.id}'", "type", self.type, PROJECT_TYPES)

    def find_scene(self, scene_id: Optional[str]) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    @property
    def active_scene(self) -> Optional[Scene]:
        return self.find_scene(self.active_scene_id)


@dataclass(frozen=True)
class EditorView:
    """Ephemeral view state of one editor session. Never persisted."""

    selected_object_id: Optional[str] = None
    tool: str = "select"
    show_grid: bool = True
    show_colliders: bool = False
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    is_playing: bool = False


@dataclass(frozen=True)
class GameState:
    """Container for the whole editor state.

    The reducer is the only thing that produces new values of this type; the
    controller and the renderer only read it.
    """

    current_project: Optional[Project] = None
    projects: Tuple[Project, ...] = ()
    editor: EditorView = field(default_factory=EditorView)
    assets: Tuple[Asset, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def active_scene(self) -> Optional[Scene]:
        if self.current_project is None:
            return None
        return self.current_project.active_scene


def resolve_object_color(obj: GameObject) -> str:
    """Fill color of an object: own color, then properties, then the default."""
    if obj.color:
        return obj.color
    prop_color = obj.properties.get("color")
    if isinstance(prop_color, str) and prop_color:
        return prop_color
    return DEFAULT_OBJECT_COLOR


def utc_timestamp() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()
