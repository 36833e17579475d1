"""Generation settings and their plain-text round-trip.

The dataclasses hold raw values; :func:`clamp_settings` snaps them into the
supported ranges and is applied wherever settings enter from outside (HTTP
payloads, imported text, CLI files). The generator itself tolerates
unclamped values so tests can exercise degenerate grids directly.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .errors import SettingsError
from .manual_seeds import ManualSeedConfig, validate_seed_batch

SPINE_WIDTHS = (1, 3, 5, 7)
TURN_OVERRIDES = ("N", "S", "U", "F")
EJECTION_SIDES = ("left", "right", "both", "any")


@dataclass
class SpineSettings:
    spine_width: int = 1
    spine_acts_as_wall: bool = True
    max_forks: int = 2


@dataclass
class EjectionSettings:
    ejection_count: int = 1
    ejection_side: str = "any"
    min_interval: int = 2
    max_interval: int = 5
    min_distance: int = 3
    max_distance: int = 6
    dud_chance: float = 0.1


@dataclass
class RoomGrowthSettings:
    min_width: int = 3
    max_width: int = 8
    min_height: int = 3
    max_height: int = 8


@dataclass
class DungeonSettings:
    grid_width: int = 64
    grid_height: int = 64
    seed_count: int = 12
    spine: SpineSettings = field(default_factory=SpineSettings)
    force_straight: bool = False
    turn_penalty: int = 4
    branch_penalty: float = 1.0
    turn_override: str = "N"
    ejection: EjectionSettings = field(default_factory=EjectionSettings)
    room_growth: RoomGrowthSettings = field(default_factory=RoomGrowthSettings)
    symmetry: int = 0
    symmetry_strict_primary: bool = False
    symmetry_strict_secondary: bool = False
    symmetry_strict_tertiary: bool = False
    seed: Optional[int] = None
    manual_seed_queue: List[ManualSeedConfig] = field(default_factory=list)


# camelCase key -> (attribute, kind)
_SPINE_FIELDS = {
    "spineWidth": ("spine_width", int),
    "spineActsAsWall": ("spine_acts_as_wall", bool),
    "maxForks": ("max_forks", int),
}
_EJECTION_FIELDS = {
    "ejectionCount": ("ejection_count", int),
    "ejectionSide": ("ejection_side", str),
    "minInterval": ("min_interval", int),
    "maxInterval": ("max_interval", int),
    "minDistance": ("min_distance", int),
    "maxDistance": ("max_distance", int),
    "dudChance": ("dud_chance", float),
}
_GROWTH_FIELDS = {
    "minWidth": ("min_width", int),
    "maxWidth": ("max_width", int),
    "minHeight": ("min_height", int),
    "maxHeight": ("max_height", int),
}
_TOP_FIELDS = {
    "gridWidth": ("grid_width", int),
    "gridHeight": ("grid_height", int),
    "seedCount": ("seed_count", int),
    "forceStraight": ("force_straight", bool),
    "turnPenalty": ("turn_penalty", int),
    "branchPenalty": ("branch_penalty", float),
    "turnOverride": ("turn_override", str),
    "symmetry": ("symmetry", int),
    "symmetryStrictPrimary": ("symmetry_strict_primary", bool),
    "symmetryStrictSecondary": ("symmetry_strict_secondary", bool),
    "symmetryStrictTertiary": ("symmetry_strict_tertiary", bool),
}
_SECTIONS = {
    "spine": ("spine", _SPINE_FIELDS),
    "ejection": ("ejection", _EJECTION_FIELDS),
    "roomGrowth": ("room_growth", _GROWTH_FIELDS),
}
_CHOICES = {
    "turn_override": TURN_OVERRIDES,
    "ejection_side": EJECTION_SIDES,
}


def _section_to_dict(obj, fields) -> Dict[str, Any]:
    return {key: getattr(obj, attr) for key, (attr, _) in fields.items()}


def settings_to_dict(settings: DungeonSettings) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, (attr, _) in _TOP_FIELDS.items():
        out[key] = getattr(settings, attr)
    for key, (attr, fields) in _SECTIONS.items():
        out[key] = _section_to_dict(getattr(settings, attr), fields)
    out["seed"] = settings.seed
    if settings.manual_seed_queue:
        out["manualSeedQueue"] = [cfg.to_dict() for cfg in settings.manual_seed_queue]
    return out


def _coerce(value: Any, kind, path: str, errors: List[str]):
    if kind is bool:
        if isinstance(value, bool):
            return value
        errors.append(f"{path}: expected true/false")
        return None
    if kind in (int, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{path}: expected a number")
            return None
        return kind(value)
    if not isinstance(value, str):
        errors.append(f"{path}: expected a string")
        return None
    return value


def _read_fields(raw: Dict[str, Any], fields, prefix: str, strict: bool, errors: List[str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, (attr, kind) in fields.items():
        path = f"{prefix}{key}"
        if key not in raw:
            if strict:
                errors.append(f"{path}: missing")
            continue
        value = _coerce(raw[key], kind, path, errors)
        if value is None:
            continue
        choices = _CHOICES.get(attr)
        if choices and value not in choices:
            errors.append(f"{path}: must be one of {', '.join(choices)}")
            continue
        values[attr] = value
    return values


def settings_from_dict(data: Any, strict: bool = True, base: Optional[DungeonSettings] = None) -> DungeonSettings:
    """Build clamped settings from a camelCase mapping.

    ``strict`` requires the exact field set (used for text import); otherwise
    missing keys keep their values from ``base`` (defaults when omitted).
    Unknown keys are always rejected. Raises :class:`SettingsError` listing
    every problem found.
    """
    if not isinstance(data, dict):
        raise SettingsError(["settings must be an object"])
    errors: List[str] = []
    known = set(_TOP_FIELDS) | set(_SECTIONS) | {"seed", "manualSeedQueue"}
    for key in sorted(set(data) - known):
        errors.append(f"{key}: unknown setting")

    settings = base if base is not None else DungeonSettings()
    top = _read_fields(data, _TOP_FIELDS, "", strict, errors)
    sections = {}
    for key, (attr, fields) in _SECTIONS.items():
        raw = data.get(key)
        if raw is None:
            if strict:
                errors.append(f"{key}: missing")
            sections[attr] = getattr(settings, attr)
            continue
        if not isinstance(raw, dict):
            errors.append(f"{key}: must be an object")
            continue
        for unknown in sorted(set(raw) - set(fields)):
            errors.append(f"{key}.{unknown}: unknown setting")
        values = _read_fields(raw, fields, f"{key}.", strict, errors)
        sections[attr] = replace(getattr(settings, attr), **values)

    seed = settings.seed
    if "seed" in data:
        raw_seed = data["seed"]
        if raw_seed is None or (isinstance(raw_seed, int) and not isinstance(raw_seed, bool)):
            seed = raw_seed
        else:
            errors.append("seed: expected an integer or null")
    elif strict:
        errors.append("seed: missing")

    queue = list(settings.manual_seed_queue)
    if "manualSeedQueue" in data:
        queue, queue_errors = validate_seed_batch(data["manualSeedQueue"])
        errors.extend(queue_errors)

    if errors:
        raise SettingsError(errors)
    return clamp_settings(replace(settings, **top, **sections, seed=seed, manual_seed_queue=queue))


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def _ordered(lo, hi, bound_lo, bound_hi):
    lo, hi = _clamp(int(lo), bound_lo, bound_hi), _clamp(int(hi), bound_lo, bound_hi)
    return (lo, hi) if lo <= hi else (hi, lo)


def _nearest_width(value: int) -> int:
    return min(SPINE_WIDTHS, key=lambda w: (abs(w - value), w))


def clamp_settings(settings: DungeonSettings) -> DungeonSettings:
    """Return a copy with every field snapped into its supported range."""
    ej = settings.ejection
    growth = settings.room_growth
    min_interval, max_interval = _ordered(ej.min_interval, ej.max_interval, 0, 15)
    min_distance, max_distance = _ordered(ej.min_distance, ej.max_distance, 0, 15)
    min_width, max_width = _ordered(growth.min_width, growth.max_width, 1, 15)
    min_height, max_height = _ordered(growth.min_height, growth.max_height, 1, 15)
    turn_override = str(settings.turn_override).upper()
    return replace(
        settings,
        grid_width=_clamp(int(settings.grid_width), 32, 128),
        grid_height=_clamp(int(settings.grid_height), 32, 128),
        seed_count=_clamp(int(settings.seed_count), 4, 64),
        spine=SpineSettings(
            spine_width=_nearest_width(int(settings.spine.spine_width)),
            spine_acts_as_wall=bool(settings.spine.spine_acts_as_wall),
            max_forks=_clamp(int(settings.spine.max_forks), 0, 5),
        ),
        force_straight=bool(settings.force_straight),
        turn_penalty=_clamp(int(settings.turn_penalty), 0, 20),
        branch_penalty=_clamp(float(settings.branch_penalty), 0.0, 2.0),
        turn_override=turn_override if turn_override in TURN_OVERRIDES else "N",
        ejection=EjectionSettings(
            ejection_count=_clamp(int(ej.ejection_count), 1, 3),
            ejection_side=ej.ejection_side if ej.ejection_side in EJECTION_SIDES else "any",
            min_interval=min_interval,
            max_interval=max_interval,
            min_distance=min_distance,
            max_distance=max_distance,
            dud_chance=_clamp(float(ej.dud_chance), 0.0, 0.5),
        ),
        room_growth=RoomGrowthSettings(min_width, max_width, min_height, max_height),
        symmetry=_clamp(int(settings.symmetry), 0, 100),
        manual_seed_queue=list(settings.manual_seed_queue),
    )


def export_settings(settings: DungeonSettings) -> str:
    """Plain-text (indented JSON) export suitable for copy/paste."""
    return json.dumps(settings_to_dict(settings), indent=2)


def import_settings(text: str) -> DungeonSettings:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise SettingsError([f"not valid JSON: {exc}"]) from exc
    return settings_from_dict(data, strict=True)


__all__ = [
    "SpineSettings",
    "EjectionSettings",
    "RoomGrowthSettings",
    "DungeonSettings",
    "settings_to_dict",
    "settings_from_dict",
    "clamp_settings",
    "export_settings",
    "import_settings",
]
