"""Exception hierarchy for dungeon generation.

Settings problems are reported at the boundary (API / CLI / import) and never
reach the generator. Generation errors are fatal to a single run only.
"""
from typing import Iterable


class DelveError(Exception):
    """Base class for every error raised by the delve package."""


class SettingsError(DelveError):
    """Raised when a settings payload cannot be parsed.

    Carries the full list of problems so callers can report them together.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid settings")


class GenerationError(DelveError):
    """A generation run could not produce valid output."""


class DungeonInvariantError(GenerationError):
    """Assembled output violated a structural invariant (programming error)."""


class StateFrozenError(GenerationError):
    """Attempted to mutate generation state after the run completed."""


__all__ = [
    "DelveError",
    "SettingsError",
    "GenerationError",
    "DungeonInvariantError",
    "StateFrozenError",
]
