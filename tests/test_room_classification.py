import pytest

from delve.dungeon import DungeonSettings, generate
from delve.dungeon.classify import classify_room, classify_shape, pick_role
from delve.dungeon.state import Rect


@pytest.mark.parametrize(
    "rect,expected",
    [
        (Rect(0, 0, 1, 40), "corridor"),
        (Rect(0, 0, 40, 1), "corridor"),
        (Rect(0, 0, 1, 1), "corridor"),
        (Rect(0, 0, 2, 3), "small"),
        (Rect(0, 0, 3, 3), "medium"),
        (Rect(0, 0, 4, 7), "medium"),
        (Rect(0, 0, 4, 8), "large"),
    ],
)
def test_shape_buckets(rect, expected):
    assert classify_shape(rect) == expected


def test_corridor_checked_before_size():
    # area 40 would be "large" if size were checked first
    assert classify_room(Rect(5, 5, 1, 40)).size == "corridor"


def test_role_precedence():
    assert pick_role("exit", "entrance") == "entrance"
    assert pick_role(None, "exit", "starter") == "exit"
    assert pick_role(None, None, "starter") == "starter"
    assert pick_role(None, None) is None


def test_label_prefers_role():
    c = classify_room(Rect(0, 0, 3, 3), "exit")
    assert c.label == "exit" and c.size == "medium"
    assert classify_room(Rect(0, 0, 3, 3)).label == "medium"


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_generated_roles_unique(seed):
    data = generate(DungeonSettings(), seed)
    labels = [r.classification.label for r in data.rooms]
    for role in ("entrance", "exit", "starter"):
        assert labels.count(role) <= 1
    if len(data.rooms) > 1:
        assert "entrance" in labels and "exit" in labels
    starts = [r for r in data.rooms if r.type == "start"]
    assert len(starts) == (1 if data.rooms else 0)
