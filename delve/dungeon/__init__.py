"""Public dungeon package interface.

Spine-seed generation, assembly and analysis plus the settings round-trip.
"""

from .analysis import DungeonAnalysisResult, analyze
from .assembler import assemble_spine
from .config import (
    DungeonSettings,
    EjectionSettings,
    RoomGrowthSettings,
    SpineSettings,
    clamp_settings,
    export_settings,
    import_settings,
    settings_from_dict,
    settings_to_dict,
)
from .errors import (
    DelveError,
    DungeonInvariantError,
    GenerationError,
    SettingsError,
    StateFrozenError,
)
from .generator import SpineSeedGenerator
from .models import DungeonData, DungeonObject, Exit, Room
from .pipeline import Dungeon, generate
from .tiles import ACTIVE, DEAD, DOOR, LIVE, WALL  # noqa: F401

__all__ = [
    "Dungeon",
    "generate",
    "SpineSeedGenerator",
    "assemble_spine",
    "analyze",
    "DungeonAnalysisResult",
    "DungeonData",
    "DungeonObject",
    "Exit",
    "Room",
    "DungeonSettings",
    "SpineSettings",
    "EjectionSettings",
    "RoomGrowthSettings",
    "clamp_settings",
    "export_settings",
    "import_settings",
    "settings_from_dict",
    "settings_to_dict",
    "DelveError",
    "SettingsError",
    "GenerationError",
    "DungeonInvariantError",
    "StateFrozenError",
    "DEAD",
    "LIVE",
    "ACTIVE",
    "WALL",
    "DOOR",
]
