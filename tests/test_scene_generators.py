import random

import pytest

from state import OBJECT_TYPES, validate_property_value
from utils.scene_generators import (
    TEMPLATE_NAMES,
    generate_id,
    generate_project,
    normalize_template_name,
)


@pytest.mark.parametrize("template", TEMPLATE_NAMES)
class TestTemplates:
    def test_project_invariants(self, template):
        project = generate_project(template, rng=random.Random(7))
        assert project.type == template
        assert len(project.scenes) == 1
        assert project.active_scene is project.scenes[0]
        assert project.created_at == project.last_modified

    def test_objects_are_valid(self, template):
        scene = generate_project(template, rng=random.Random(7)).active_scene
        ids = [o.id for o in scene.objects]
        assert len(ids) == len(set(ids))
        for obj in scene.objects:
            assert obj.type in OBJECT_TYPES
            assert obj.width >= 0 and obj.height >= 0
            assert obj.color
            validate_property_value(obj.properties)

    def test_same_seed_same_project(self, template):
        first = generate_project(template, rng=random.Random(3), now="t")
        second = generate_project(template, rng=random.Random(3), now="t")
        assert first == second


def test_platformer_layout():
    scene = generate_project("platformer").active_scene
    names = [o.name for o in scene.objects]
    assert names[0] == "Ground"
    assert "Player" in names
    ground = scene.objects[0]
    assert (ground.x, ground.y, ground.width, ground.height) == (0, 480, 1024, 96)


def test_puzzle_is_eight_by_six():
    scene = generate_project("puzzle").active_scene
    assert len(scene.objects) == 48
    assert {o.properties["gridX"] for o in scene.objects} == set(range(8))


def test_unknown_template_gives_empty_platformer():
    project = generate_project("space-opera")
    assert project.type == "platformer"
    assert project.active_scene.name == "Main Scene"
    assert project.active_scene.objects == ()


@pytest.mark.parametrize("name,expected", [
    ("Platformer", "platformer"),
    ("rpg-game", "rpg"),
    ("2D Platformer", "platformer"),
    (" Shooter ", "shooter"),
    ("", ""),
])
def test_normalize_template_name(name, expected):
    assert normalize_template_name(name) == expected


def test_generate_id_shape():
    ident = generate_id(random.Random(1))
    assert len(ident) == 9
    assert ident.isalnum() and ident == ident.lower()
