#!/usr/bin/env python3
"""
Fixed-size 2-D field of cells.

The grid owns obstacle state, adjacency and the designated start/goal.
Cells are created once, stored in a flat arena (index = y * width + x) and
mutated in place; the grid is never resized.
"""

import logging
import random
from typing import Iterator, List, Optional, Sequence, Union

from gridstar.core.cell import Cell
from gridstar.core.errors import OutOfBounds
from gridstar.core.types import Coord

logger = logging.getLogger(__name__)

# west, east, north, south; f-cost ties depend on this order
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))

_BLOCK_CHARS = "#1Xx"


class Grid:
    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"grid needs positive dimensions, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._cells: List[Cell] = []
        for y in range(self._height):
            for x in range(self._width):
                self._cells.append(Cell(x, y, len(self._cells), self._cells))
        self.start: Optional[Coord] = None
        self.goal: Optional[Coord] = None

    @classmethod
    def from_rows(cls, rows: Sequence[Union[str, Sequence[int]]],
                  start: Optional[Coord] = None, goal: Optional[Coord] = None) -> "Grid":
        """Build a grid from rows (top row first); '#', 'X' or 1 marks an obstacle."""
        if not rows:
            raise ValueError("from_rows() needs at least one row")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("all rows must have the same length")
        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, v in enumerate(row):
                blocked = v in _BLOCK_CHARS if isinstance(v, str) else v == 1
                if blocked:
                    grid.get(x, y).set_obstacle(True)
        if start is not None:
            grid.set_start(*start)
        if goal is not None:
            grid.set_goal(*goal)
        return grid

    # -------------------- shape & access --------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __len__(self) -> int:
        return len(self._cells)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self._width, self._height)
        return self._cells[y * self._width + x]

    def at(self, index: int) -> Cell:
        return self._cells[index]

    def cells(self) -> Iterator[Cell]:
        return iter(self._cells)

    def owns(self, cell: Cell) -> bool:
        return 0 <= cell.index < len(self._cells) and self._cells[cell.index] is cell

    def neighbors(self, cell: Cell) -> List[Cell]:
        """In-bounds, non-obstacle 4-neighbours in west, east, north, south order."""
        out: List[Cell] = []
        for dx, dy in DIRECTIONS:
            nx, ny = cell.x + dx, cell.y + dy
            if self.in_bounds(nx, ny):
                n = self._cells[ny * self._width + nx]
                if not n.obstacle:
                    out.append(n)
        return out

    # -------------------- obstacles --------------------

    def is_endpoint(self, x: int, y: int) -> bool:
        return (x, y) == self.start or (x, y) == self.goal

    def set_obstacle(self, x: int, y: int, flag: bool = True) -> bool:
        """Set or lift an obstacle. Start and goal cells are left alone."""
        cell = self.get(x, y)
        if self.is_endpoint(x, y):
            return False
        changed = cell.obstacle != bool(flag)
        cell.set_obstacle(flag)
        return changed

    def toggle_obstacle(self, x: int, y: int) -> bool:
        return self.set_obstacle(x, y, not self.get(x, y).obstacle)

    def obstacle_count(self) -> int:
        return sum(1 for c in self._cells if c.obstacle)

    def add_random_obstacles(self, count: int, rng: Optional[random.Random] = None) -> int:
        """Place up to `count` obstacles on free, non-endpoint cells."""
        rng = rng or random.Random()
        free = [c for c in self._cells if not c.obstacle and not self.is_endpoint(c.x, c.y)]
        chosen = rng.sample(free, min(max(0, count), len(free)))
        for c in chosen:
            c.set_obstacle(True)
        logger.debug("placed %d random obstacles (%d requested)", len(chosen), count)
        return len(chosen)

    # -------------------- endpoints --------------------

    def _release(self, coord: Coord) -> None:
        # a cell that stops being an endpoint keeps whatever role is left
        cell = self.get(*coord)
        if coord == self.start:
            cell.mark_start()
        elif coord == self.goal:
            cell.mark_goal()
        else:
            cell.reset()

    def set_start(self, x: int, y: int) -> bool:
        """Designate the start cell. Refused (False) on an obstacle."""
        cell = self.get(x, y)
        if cell.obstacle:
            return False
        old, self.start = self.start, (x, y)
        if old is not None and old != self.start:
            self._release(old)
        cell.mark_start()
        return True

    def set_goal(self, x: int, y: int) -> bool:
        """Designate the goal cell. Refused (False) on an obstacle."""
        cell = self.get(x, y)
        if cell.obstacle:
            return False
        old, self.goal = self.goal, (x, y)
        if old is not None and old != self.goal:
            self._release(old)
        cell.mark_goal()
        return True

    # -------------------- reset --------------------

    def clear(self, obstacles: bool = False) -> None:
        """Reset search metadata on every cell; obstacles survive unless asked."""
        for c in self._cells:
            if obstacles and c.obstacle:
                c.set_obstacle(False)
            else:
                c.reset()
        if self.start is not None:
            self.get(*self.start).mark_start()
        if self.goal is not None:
            self.get(*self.goal).mark_goal()
        logger.debug("grid %dx%d cleared (obstacles=%s)", self._width, self._height, obstacles)
