from dataclasses import replace

from state import GameObject
from utils.collision_utils import contains_point, object_at, objects_at


def make_box(obj_id, x=0, y=0, width=100, height=100, **kwargs):
    return GameObject(id=obj_id, type="platform", name=obj_id, x=x, y=y,
                      width=width, height=height, **kwargs)


class TestObjectAt:
    def test_topmost_object_wins(self):
        back = make_box("back")
        front = make_box("front", x=50, y=50)
        assert object_at((60, 60), (back, front)).id == "front"
        assert object_at((10, 10), (back, front)).id == "back"

    def test_fully_covering_later_object_wins(self):
        a = make_box("a", x=100, y=100, width=50, height=50)
        b = make_box("b", x=80, y=80, width=100, height=100)
        for point in [(100, 100), (125, 125), (150, 150)]:
            assert object_at(point, (a, b)).id == "b"
        assert object_at((125, 125), (b, a)).id == "a"

    def test_edges_are_inclusive(self):
        box = make_box("box", x=10, y=10, width=20, height=20)
        assert contains_point(box, 10, 10)
        assert contains_point(box, 30, 30)
        assert not contains_point(box, 30.01, 30)

    def test_locked_and_hidden_objects_are_skipped(self):
        back = make_box("back")
        locked = make_box("locked", locked=True)
        hidden = make_box("hidden", visible=False)
        assert object_at((5, 5), (back, locked, hidden)).id == "back"
        assert object_at((5, 5), (locked, hidden)) is None

    def test_miss_returns_none(self):
        assert object_at((500, 500), (make_box("box"),)) is None

    def test_objects_at_lists_topmost_first(self):
        a, b = make_box("a"), make_box("b")
        c = replace(make_box("c"), locked=True)
        assert [o.id for o in objects_at((1, 1), (a, b, c))] == ["b", "a"]
