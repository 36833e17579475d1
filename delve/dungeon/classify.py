from dataclasses import dataclass
from typing import Optional

from .state import Rect

SMALL_MAX_AREA = 6
LARGE_MIN_AREA = 32

# highest precedence first
ROLES = ("entrance", "exit", "starter")


@dataclass(frozen=True)
class RoomClassification:
    size: str
    role: Optional[str] = None

    @property
    def label(self) -> str:
        return self.role or self.size

    def __str__(self):
        return self.label


def classify_shape(rect: Rect) -> str:
    # corridor check must come before the size buckets
    if rect.width == 1 or rect.height == 1:
        return "corridor"
    if rect.area <= SMALL_MAX_AREA:
        return "small"
    if rect.area >= LARGE_MIN_AREA:
        return "large"
    return "medium"


def pick_role(*candidates: Optional[str]) -> Optional[str]:
    """Highest-precedence role among ``candidates`` (None entries ignored)."""
    present = {c for c in candidates if c}
    for role in ROLES:
        if role in present:
            return role
    return None


def classify_room(rect: Rect, role: Optional[str] = None) -> RoomClassification:
    return RoomClassification(size=classify_shape(rect), role=role)


__all__ = ["RoomClassification", "classify_shape", "classify_room", "pick_role", "ROLES"]
