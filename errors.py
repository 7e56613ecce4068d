"""Exception types raised by the puzzle core.

Overlaps, pruned branches and exhausted cursors are ordinary search outcomes
and are reported as booleans, never through these classes.
"""

from __future__ import annotations


class PuzzleError(Exception):
    """Base class for every error raised by the solver."""


class ConfigError(PuzzleError, ValueError):
    """The board or piece set cannot be searched (fatal at startup)."""


class ShapeError(ConfigError):
    """A textual piece description is malformed."""


class InvariantError(PuzzleError, RuntimeError):
    """Board or cursor bookkeeping went wrong; indicates a bug."""


class PlacementOutOfBounds(InvariantError):
    pass


class SearchBusy(PuzzleError):
    """A background search is already running."""


__all__ = [
    "PuzzleError",
    "ConfigError",
    "ShapeError",
    "InvariantError",
    "PlacementOutOfBounds",
    "SearchBusy",
]
