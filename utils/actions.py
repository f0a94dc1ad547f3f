"""Edit actions. Every change to a GameState goes through one of these."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from state import Asset, GameObject, Project


@dataclass(frozen=True)
class SetProject:
    project: Project


@dataclass(frozen=True)
class UpdateProject:
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AddProject:
    project: Project


@dataclass(frozen=True)
class DeleteProject:
    project_id: str


@dataclass(frozen=True)
class SetProjects:
    projects: Tuple[Project, ...] = ()


@dataclass(frozen=True)
class AddObject:
    scene_id: str
    obj: GameObject


@dataclass(frozen=True)
class UpdateObject:
    scene_id: str
    object_id: str
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteObject:
    scene_id: str
    object_id: str


@dataclass(frozen=True)
class SelectObject:
    object_id: Optional[str] = None


@dataclass(frozen=True)
class SetTool:
    tool: str


@dataclass(frozen=True)
class SetZoom:
    zoom: float


@dataclass(frozen=True)
class SetPan:
    x: float
    y: float


@dataclass(frozen=True)
class ToggleGrid:
    pass


@dataclass(frozen=True)
class ToggleColliders:
    pass


@dataclass(frozen=True)
class TogglePlay:
    pass


@dataclass(frozen=True)
class AddAsset:
    asset: Asset


@dataclass(frozen=True)
class DeleteAsset:
    asset_id: str


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class SetError:
    error: Optional[str] = None
