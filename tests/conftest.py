"""
Shared fixtures for scene editor tests.

Provides a small project with one 1024x576 scene, a platform object and a
ProjectManager writing into a temporary directory.
"""
import os

# Rendering tests draw onto off-screen surfaces; no window is opened.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from state import GameObject, GameState, Project, Scene, Settings
from utils.actions import SetProject
from utils.project_manager import ProjectManager
from utils.reducer import apply_action

FIXED_TIME = "2024-01-01T00:00:00+00:00"


@pytest.fixture(scope="session", autouse=True)
def pygame_session():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def platform():
    return GameObject(id="ground", type="platform", name="Ground",
                      x=0, y=480, width=1024, height=96, properties={"color": "#10b981"})


@pytest.fixture
def empty_scene():
    return Scene(id="scene-1", name="Main Scene", width=1024, height=576)


@pytest.fixture
def empty_project(empty_scene):
    return Project(
        id="project-1",
        name="Test Game",
        description="A test game",
        type="platformer",
        created_at=FIXED_TIME,
        last_modified=FIXED_TIME,
        scenes=(empty_scene,),
        active_scene_id=empty_scene.id,
        settings=Settings(snap_to_grid=False),
    )


@pytest.fixture
def loaded_state(empty_project):
    return apply_action(GameState(), SetProject(empty_project))


@pytest.fixture
def project_manager(tmp_path):
    return ProjectManager(str(tmp_path / "projects.json"))
