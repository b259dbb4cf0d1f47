#!/usr/bin/env python3
"""
Exceptions raised by the search core.

InvalidEndpoints and Unreachable are not here: they are search statuses
(see gridstar.core.types.Status), never exceptions.
"""


class GridstarError(Exception):
    """Base class for every error raised by gridstar."""


class OutOfBounds(GridstarError, IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside a {width}x{height} grid")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class CycleDetected(GridstarError, ValueError):
    """A parent assignment would make a cell its own ancestor."""


class NoPath(GridstarError, LookupError):
    """Parent links do not lead back to the expected start cell."""


class SearchNotRunning(GridstarError, RuntimeError):
    """step() called on a search that is not running (strict mode only)."""


class MapFormatError(GridstarError, ValueError):
    """A map file or map dict does not describe a valid grid."""
