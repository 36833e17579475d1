"""Manual seed queue: explicit room placements consumed before random ejection.

A queue entry is a small JSON object::

    {"schemaVersion": 1, "id": "boss", "width": {"min": 6, "max": 9},
     "height": 7, "distance": 4, "side": "left", "repeat": 2}

Ranges accept either a bare integer or a ``{"min", "max"}`` object. When the
queue runs dry the ejector falls back to a virtual config derived from the
generation settings.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

SCHEMA_VERSION = 1
SEED_TYPES = ("room", "wall")
SEED_SIDES = ("left", "right", "any")


@dataclass(frozen=True)
class ValueRange:
    min: int
    max: int

    def roll(self, rng) -> int:
        return rng.next_int(self.min, self.max)

    def to_json(self):
        if self.min == self.max:
            return self.min
        return {"min": self.min, "max": self.max}

    @classmethod
    def parse(cls, raw: Any) -> "ValueRange":
        if isinstance(raw, bool):
            raise ValueError("expected a number or {min, max}")
        if isinstance(raw, (int, float)):
            return cls(int(raw), int(raw))
        if isinstance(raw, dict) and "min" in raw and "max" in raw:
            lo, hi = raw["min"], raw["max"]
            if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in (lo, hi)):
                raise ValueError("min/max must be numbers")
            lo, hi = int(lo), int(hi)
            return cls(min(lo, hi), max(lo, hi))
        raise ValueError("expected a number or {min, max}")


@dataclass(frozen=True)
class ManualSeedConfig:
    id: Optional[str] = None
    type: str = "room"
    width: Optional[ValueRange] = None
    height: Optional[ValueRange] = None
    distance: Optional[ValueRange] = None
    side: Optional[str] = None
    allow_mirror: bool = True
    mandatory: bool = True
    repeat: int = 1
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"schemaVersion": SCHEMA_VERSION, "type": self.type}
        if self.id is not None:
            out["id"] = self.id
        for key in ("width", "height", "distance"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value.to_json()
        if self.side is not None:
            out["side"] = self.side
        out["allowMirror"] = self.allow_mirror
        out["mandatory"] = self.mandatory
        if self.repeat != 1:
            out["repeat"] = self.repeat
        if self.tags:
            out["tags"] = list(self.tags)
        return out


def _parse_item(item: Any, context: str, errors: List[str]) -> Optional[ManualSeedConfig]:
    if not isinstance(item, dict):
        errors.append(f"{context}: must be an object")
        return None
    if item.get("schemaVersion") != SCHEMA_VERSION:
        errors.append(f"{context}: missing or invalid schemaVersion (must be {SCHEMA_VERSION})")
        return None
    problems = []
    ranges = {}
    for key in ("width", "height", "distance"):
        if item.get(key) is None:
            ranges[key] = None
            continue
        try:
            ranges[key] = ValueRange.parse(item[key])
        except ValueError as exc:
            problems.append(f"{context}: {key} {exc}")
    seed_type = item.get("type") or "room"
    if seed_type not in SEED_TYPES:
        problems.append(f"{context}: type must be one of {', '.join(SEED_TYPES)}")
    side = item.get("side")
    if side is not None and side not in SEED_SIDES:
        problems.append(f"{context}: side must be one of {', '.join(SEED_SIDES)}")
    seed_id = item.get("id")
    if seed_id is not None and not isinstance(seed_id, str):
        problems.append(f"{context}: id must be a string")
    if problems:
        errors.extend(problems)
        return None
    repeat = item.get("repeat")
    tags = item.get("tags")
    return ManualSeedConfig(
        id=seed_id,
        type=seed_type,
        width=ranges["width"],
        height=ranges["height"],
        distance=ranges["distance"],
        side=side,
        allow_mirror=bool(item.get("allowMirror", True)),
        mandatory=bool(item.get("mandatory", True)),
        repeat=repeat if isinstance(repeat, int) and not isinstance(repeat, bool) and repeat > 0 else 1,
        tags=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
    )


def validate_seed_batch(data: Any) -> Tuple[List[ManualSeedConfig], List[str]]:
    """Parse a list (or single object) of queue entries.

    Returns ``(valid, errors)``; invalid entries are skipped and reported.
    """
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        return [], ["manualSeedQueue must be an array or object"]
    valid: List[ManualSeedConfig] = []
    errors: List[str] = []
    for index, item in enumerate(data):
        config = _parse_item(item, f"manualSeedQueue item {index + 1}", errors)
        if config is not None:
            valid.append(config)
    return valid, errors


def expand_repeats(seeds) -> List[ManualSeedConfig]:
    """Flatten ``repeat`` counts; repeated ids get ``_1``, ``_2``... suffixes."""
    expanded: List[ManualSeedConfig] = []
    for seed in seeds:
        count = seed.repeat if seed.repeat > 0 else 1
        for i in range(count):
            seed_id = seed.id
            if count > 1 and seed_id:
                seed_id = f"{seed_id}_{i + 1}"
            expanded.append(replace(seed, id=seed_id, repeat=1))
    return expanded


def virtual_config(settings) -> ManualSeedConfig:
    """Config used for automatic ejections once the manual queue is empty."""
    growth = settings.room_growth
    ejection = settings.ejection
    return ManualSeedConfig(
        type="room",
        width=ValueRange(min(growth.min_width, growth.max_width), max(growth.min_width, growth.max_width)),
        height=ValueRange(min(growth.min_height, growth.max_height), max(growth.min_height, growth.max_height)),
        distance=ValueRange(
            min(ejection.min_distance, ejection.max_distance),
            max(ejection.min_distance, ejection.max_distance),
        ),
        side=None,
        allow_mirror=True,
        mandatory=False,
    )


__all__ = [
    "SCHEMA_VERSION",
    "ValueRange",
    "ManualSeedConfig",
    "validate_seed_batch",
    "expand_repeats",
    "virtual_config",
]
