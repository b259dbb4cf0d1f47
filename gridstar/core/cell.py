#!/usr/bin/env python3
"""
A single grid position plus the search metadata A* keeps on it.

Cells live in their grid's arena (a flat list indexed by y * width + x).
The parent link is stored as an arena index and resolved on read, so a
cell never owns its parent.
"""

from math import inf
from typing import List, Optional

from gridstar.core.errors import CycleDetected
from gridstar.core.types import Coord, Tag

# tags an obstacle cell may never carry
_WALKABLE_ONLY = (Tag.START, Tag.GOAL, Tag.OPEN, Tag.CLOSED, Tag.PATH)


class Cell:
    __slots__ = ("_x", "_y", "_index", "_arena", "obstacle", "tag",
                 "_g", "_h", "_f", "_parent")

    def __init__(self, x: int, y: int, index: int, arena: List["Cell"]):
        self._x = x
        self._y = y
        self._index = index
        self._arena = arena
        self.obstacle = False
        self.tag = Tag.BLANK
        self._g = inf
        self._h = 0.0
        self._f = inf
        self._parent: Optional[int] = None

    # -------------------- identity --------------------

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def index(self) -> int:
        return self._index

    @property
    def coord(self) -> Coord:
        return (self._x, self._y)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._x == other._x and self._y == other._y

    def __hash__(self) -> int:
        return hash((self._x, self._y))

    def __repr__(self) -> str:
        return f"Cell({self._x}, {self._y}, tag={self.tag.value}, g={self._g:.2f}, f={self._f:.2f})"

    # -------------------- costs --------------------

    @property
    def g(self) -> float:
        return self._g

    @g.setter
    def g(self, value: float) -> None:
        self._g = float(value)
        self._f = self._g + self._h

    @property
    def h(self) -> float:
        return self._h

    @h.setter
    def h(self, value: float) -> None:
        self._h = float(value)
        self._f = self._g + self._h

    @property
    def f(self) -> float:
        return self._f

    # -------------------- parent link --------------------

    @property
    def parent(self) -> Optional["Cell"]:
        if self._parent is None:
            return None
        return self._arena[self._parent]

    def set_parent(self, candidate: Optional["Cell"]) -> None:
        """Point this cell at `candidate`, refusing any assignment that closes a loop."""
        if candidate is None:
            self._parent = None
            return
        node: Optional[Cell] = candidate
        while node is not None:
            if node._index == self._index:
                raise CycleDetected(
                    f"cannot set parent of {self.coord} to {candidate.coord}: "
                    f"{self.coord} is already among its ancestors"
                )
            node = node.parent
        self._parent = candidate._index

    # -------------------- tags --------------------

    def _retag(self, tag: Tag) -> None:
        if self.obstacle and tag in _WALKABLE_ONLY:
            raise ValueError(f"obstacle cell {self.coord} cannot be tagged {tag.value}")
        self.tag = tag

    def mark_open(self) -> None:
        self._retag(Tag.OPEN)

    def mark_closed(self) -> None:
        self._retag(Tag.CLOSED)

    def mark_path(self) -> None:
        self._retag(Tag.PATH)

    def mark_blank(self) -> None:
        self._retag(Tag.OBSTACLE if self.obstacle else Tag.BLANK)
        self._parent = None

    def mark_start(self) -> None:
        self._retag(Tag.START)
        self._parent = None

    def mark_goal(self) -> None:
        self._retag(Tag.GOAL)
        self._parent = None

    # -------------------- lifecycle --------------------

    def reset(self) -> None:
        """Drop all search metadata; the obstacle flag is kept."""
        self._g = inf
        self._h = 0.0
        self._f = inf
        self.mark_blank()

    def set_obstacle(self, flag: bool) -> None:
        self.obstacle = bool(flag)
        self.reset()
