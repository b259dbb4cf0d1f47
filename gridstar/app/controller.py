#!/usr/bin/env python3
"""
Drives a SearchState for an interactive front end.

The controller owns everything the search core leaves to its caller:
timing (steps/sec), run/pause, editing the map between runs and turning a
Found search into a tagged path. It never touches pygame, so the viewer is
just drawing plus event plumbing.
"""

import logging
import random
import time
from enum import Enum
from typing import Callable, List, Optional

from gridstar.core.cell import Cell
from gridstar.core.grid import Grid
from gridstar.core.heuristics import Heuristic, euclidean
from gridstar.core.path import mark_path, path_cost, reconstruct
from gridstar.core.search import SearchState
from gridstar.core.types import Status

logger = logging.getLogger(__name__)

MAX_BURST = 8  # steps per tick, however far behind the clock is


class EditMode(Enum):
    PLACE_START = "place_start"
    PLACE_GOAL = "place_goal"
    SET_OBSTACLE = "set_obstacle"
    REMOVE_OBSTACLE = "remove_obstacle"


_STATE_LABELS = {
    Status.FOUND: "Found",
    Status.UNREACHABLE: "Unreachable",
    Status.INVALID_ENDPOINTS: "Invalid endpoints",
}


class Controller:
    def __init__(self, grid: Grid, steps_per_sec: int = 20, heuristic: Heuristic = euclidean,
                 strict: bool = False, clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None):
        self.grid = grid
        self.search = SearchState(heuristic=heuristic, strict=strict)
        self.steps_per_sec = steps_per_sec
        self.clock = clock
        self.rng = rng or random.Random()

        self.running = False
        self.state = "Idle"
        self.mode = EditMode.SET_OBSTACLE
        self.path: List[Cell] = []
        self._last_step_t: Optional[float] = None

    # -------------------- search control --------------------

    def start_search(self) -> Status:
        """Clear leftovers of an earlier run and seed a fresh search."""
        self.path = []
        self.grid.clear()
        status = self.search.start(self.grid)
        if status is Status.RUNNING:
            self.state = "Running" if self.running else "Paused"
        else:
            self.running = False
            self.state = _STATE_LABELS[status]
        return status

    def toggle_run(self) -> None:
        if self.search.status is not Status.RUNNING:
            self.running = True
            if self.start_search() is not Status.RUNNING:
                return
        else:
            self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._last_step_t = None

    def do_step(self) -> Status:
        """Advance the search once, starting it first when it is idle."""
        if self.search.status is Status.IDLE:
            if self.start_search() is not Status.RUNNING:
                return self.search.status
        elif self.search.status.terminal:
            return self.search.status
        status = self.search.step()
        if status is Status.FOUND:
            self.path = reconstruct(self.search.goal_cell, self.search.start_cell)
            mark_path(self.path)
        if status.terminal:
            self.running = False
            self.state = _STATE_LABELS[status]
        return status

    def tick(self) -> int:
        """Called once per frame; runs as many steps as the speed allows."""
        if not self.running:
            return 0
        now = self.clock()
        if self._last_step_t is None:
            self._last_step_t = now
            self.do_step()
            return 1
        interval = 1.0 / max(1, self.steps_per_sec)
        due = min(MAX_BURST, int((now - self._last_step_t) / interval))
        taken = 0
        while taken < due and self.running:
            self.do_step()
            taken += 1
        if taken:
            self._last_step_t = now if due == MAX_BURST else self._last_step_t + taken * interval
        return taken

    def reset(self) -> None:
        """Drop the current search; obstacles and endpoints stay."""
        self.running = False
        self.search.clear()
        if self.search.grid is not self.grid:
            self.grid.clear()
        self.path = []
        self.state = "Idle"

    def clear_all(self) -> None:
        self.reset()
        self.grid.clear(obstacles=True)

    def bump_speed(self, dv: int) -> None:
        self.steps_per_sec = int(max(1, min(120, self.steps_per_sec + dv)))

    def switch_map(self, grid: Grid) -> None:
        self.reset()
        self.grid = grid
        self.search = SearchState(heuristic=self.search.heuristic, strict=self.search.strict)
        logger.info("switched to %dx%d map with %d obstacles", grid.width, grid.height, grid.obstacle_count())

    # -------------------- editing --------------------

    def _edit(self) -> None:
        # any change to the map invalidates a search in progress
        if self.search.status is not Status.IDLE or self.path:
            self.reset()

    def add_random_obstacles(self, count: int) -> int:
        self._edit()
        placed = self.grid.add_random_obstacles(count, self.rng)
        logger.info("added %d random obstacles", placed)
        return placed

    def press(self, x: int, y: int) -> None:
        """Mouse down on a cell: choose what a drag will do, then do it once."""
        if not self.grid.in_bounds(x, y):
            return
        if (x, y) == self.grid.start:
            self.mode = EditMode.PLACE_START
        elif (x, y) == self.grid.goal:
            self.mode = EditMode.PLACE_GOAL
        elif self.grid.get(x, y).obstacle:
            self.mode = EditMode.REMOVE_OBSTACLE
            self.drag(x, y)
        else:
            self.mode = EditMode.SET_OBSTACLE
            self.drag(x, y)

    def drag(self, x: int, y: int) -> None:
        if not self.grid.in_bounds(x, y):
            return
        cell = self.grid.get(x, y)
        if self.mode is EditMode.PLACE_START:
            if (x, y) != self.grid.start and (x, y) != self.grid.goal and not cell.obstacle:
                self._edit()
                self.grid.set_start(x, y)
        elif self.mode is EditMode.PLACE_GOAL:
            if (x, y) != self.grid.goal and (x, y) != self.grid.start and not cell.obstacle:
                self._edit()
                self.grid.set_goal(x, y)
        elif self.mode is EditMode.REMOVE_OBSTACLE:
            if cell.obstacle:
                self._edit()
                self.grid.set_obstacle(x, y, False)
        elif not cell.obstacle and not self.grid.is_endpoint(x, y):
            self._edit()
            self.grid.set_obstacle(x, y, True)

    # -------------------- metrics --------------------

    def metrics(self) -> dict:
        m = self.search.metrics()
        m["path_len"] = len(self.path)
        m["total_cost"] = path_cost(self.path) if self.path else None
        return m
