#!/usr/bin/env python3
"""
A* search: one expansion per step() so a renderer can animate it.

API used by drivers:
- start(grid, start, goal) -> Status
- step() -> Status
- status / last_step / metrics()
- cancel(), clear(), run()

Open set:
- binary heap of (f, seq, index); seq is a monotonic arrival counter so equal
  f-costs pop first-in first-out.
- no decrease-key: a cheaper route pushes a fresh entry and the old one is
  dropped when popped (lazy deletion, checked against _entry_seq).

Membership lives in the _open/_closed index sets. Cell tags are only the
presentation view and never drive the algorithm.
"""

import heapq
import logging
from typing import Dict, List, Optional, Set, Tuple

from gridstar.core.cell import Cell
from gridstar.core.errors import SearchNotRunning
from gridstar.core.grid import Grid
from gridstar.core.heuristics import Heuristic, distance, euclidean
from gridstar.core.path import reconstruct
from gridstar.core.types import Status, StepResult

logger = logging.getLogger(__name__)


class SearchState:
    def __init__(self, heuristic: Heuristic = euclidean, strict: bool = False, name: str = "A*"):
        self.name = name
        self.heuristic = heuristic
        self.strict = strict

        self.grid: Optional[Grid] = None
        self.start_cell: Optional[Cell] = None
        self.goal_cell: Optional[Cell] = None
        self._status = Status.IDLE

        self._heap: List[Tuple[float, int, int]] = []   # (f, seq, index)
        self._entry_seq: Dict[int, int] = {}             # index -> seq of its live heap entry
        self._open: Set[int] = set()
        self._closed: Set[int] = set()
        self._seq = 0
        self.steps = 0
        self.popped_count = 0
        self.last_step = StepResult(status=Status.IDLE)

    # -------------------- lifecycle --------------------

    @property
    def status(self) -> Status:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is Status.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._status.terminal

    def _forget(self) -> None:
        self._heap.clear()
        self._entry_seq.clear()
        self._open.clear()
        self._closed.clear()
        self._seq = 0
        self.steps = 0
        self.popped_count = 0

    def _set_status(self, status: Status) -> Status:
        if status is not self._status:
            logger.debug("%s: %s -> %s", self.name, self._status.value, status.value)
        self._status = status
        return status

    def start(self, grid: Grid, start: Optional[Cell] = None, goal: Optional[Cell] = None) -> Status:
        """
        Seed a new search. Endpoints default to the grid's designated start/goal.

        The grid is not cleared here: callers clear a dirty grid first.
        """
        self.grid = grid
        self._forget()
        if start is None and grid.start is not None:
            start = grid.get(*grid.start)
        if goal is None and grid.goal is not None:
            goal = grid.get(*grid.goal)
        self.start_cell = start
        self.goal_cell = goal

        if not self._valid_endpoints(grid, start, goal):
            logger.info("%s: invalid endpoints start=%s goal=%s", self.name,
                        start.coord if start else None, goal.coord if goal else None)
            self.last_step = StepResult(status=Status.INVALID_ENDPOINTS, metrics=self.metrics())
            return self._set_status(Status.INVALID_ENDPOINTS)

        # explicit endpoints become the grid's designated ones
        grid.set_start(start.x, start.y)
        grid.set_goal(goal.x, goal.y)
        start.g = 0
        start.h = self.heuristic(start, goal)
        self._push(start)
        self.last_step = StepResult(status=Status.RUNNING, opened=[start.coord], metrics=self.metrics())
        logger.info("%s: searching %s -> %s on %dx%d grid", self.name,
                    start.coord, goal.coord, grid.width, grid.height)
        return self._set_status(Status.RUNNING)

    @staticmethod
    def _valid_endpoints(grid: Grid, start: Optional[Cell], goal: Optional[Cell]) -> bool:
        if start is None or goal is None:
            return False
        if not (grid.owns(start) and grid.owns(goal)):
            return False
        if start.obstacle or goal.obstacle:
            return False
        return start != goal

    def cancel(self) -> None:
        """Stop a running search; later step() calls have no effect."""
        if self._status is Status.RUNNING:
            self._set_status(Status.IDLE)

    def clear(self, obstacles: bool = False) -> None:
        """Forget the search and reset the grid's search metadata."""
        self._forget()
        if self.grid is not None:
            self.grid.clear(obstacles=obstacles)
        self.last_step = StepResult(status=Status.IDLE)
        self._set_status(Status.IDLE)

    # -------------------- open / closed sets --------------------

    def _bump(self) -> int:
        self._seq += 1
        return self._seq

    def _push(self, cell: Cell) -> None:
        seq = self._bump()
        self._entry_seq[cell.index] = seq
        self._open.add(cell.index)
        heapq.heappush(self._heap, (cell.f, seq, cell.index))

    def _pop(self) -> Optional[Cell]:
        while self._heap:
            _, seq, index = heapq.heappop(self._heap)
            if index not in self._open or self._entry_seq.get(index) != seq:
                continue  # stale entry
            self._open.discard(index)
            del self._entry_seq[index]
            cell = self.grid.at(index)
            if cell.obstacle:
                continue  # blocked after it was opened
            return cell
        return None

    def in_open(self, cell: Cell) -> bool:
        return cell.index in self._open

    def in_closed(self, cell: Cell) -> bool:
        return cell.index in self._closed

    def open_cells(self) -> List[Cell]:
        if self.grid is None:
            return []
        return [self.grid.at(i) for i in sorted(self._open)]

    def closed_cells(self) -> List[Cell]:
        if self.grid is None:
            return []
        return [self.grid.at(i) for i in sorted(self._closed)]

    def visited_cells(self) -> List[Cell]:
        """Everything the search has touched: open cells, then closed ones."""
        return self.open_cells() + self.closed_cells()

    def _is_endpoint(self, cell: Cell) -> bool:
        return cell == self.start_cell or cell == self.goal_cell

    # -------------------- main stepping logic --------------------

    def step(self) -> Status:
        """
        Run ONE A* expansion:
          - Pop the lowest-f cell.
          - If it is the goal, finish.
          - Else close it and relax its neighbours.
        """
        if self._status is not Status.RUNNING:
            if self.strict:
                raise SearchNotRunning(f"cannot step a search whose status is {self._status.value}")
            logger.debug("%s: step() ignored, status is %s", self.name, self._status.value)
            return self._status

        self.steps += 1
        current = self._pop()
        if current is None:
            self.last_step = StepResult(status=Status.UNREACHABLE, metrics=self.metrics())
            return self._set_status(Status.UNREACHABLE)
        self.popped_count += 1

        if current == self.goal_cell:
            self.last_step = StepResult(status=Status.FOUND, current=current.coord, metrics=self.metrics())
            logger.info("%s: goal %s reached after %d steps, cost %.3f",
                        self.name, current.coord, self.steps, current.g)
            return self._set_status(Status.FOUND)

        self._closed.add(current.index)
        if not self._is_endpoint(current):
            current.mark_closed()

        opened_now = []
        for nb in self.grid.neighbors(current):
            if nb.index in self._closed:
                continue
            tentative = current.g + distance(current, nb)
            if tentative < nb.g or nb.index not in self._open:
                if nb.index not in self._open:
                    opened_now.append(nb.coord)
                nb.set_parent(current)
                nb.g = tentative
                nb.h = self.heuristic(nb, self.goal_cell)
                self._push(nb)
                if not self._is_endpoint(nb):
                    nb.mark_open()

        if not self._open:
            self._set_status(Status.UNREACHABLE)
            logger.info("%s: open set exhausted, goal %s unreachable", self.name, self.goal_cell.coord)

        self.last_step = StepResult(status=self._status, opened=opened_now, closed=[current.coord],
                                    current=current.coord, metrics=self.metrics())
        return self._status

    def run(self, max_steps: Optional[int] = None) -> Status:
        """Step until a terminal status, or until max_steps expansions have run."""
        taken = 0
        while self._status is Status.RUNNING:
            if max_steps is not None and taken >= max_steps:
                break
            self.step()
            taken += 1
        return self._status

    # -------------------- metrics --------------------

    def metrics(self) -> dict:
        return {
            "algo": self.name,
            "steps": self.steps,
            "popped": self.popped_count,
            "open_size": len(self._open),
            "closed_count": len(self._closed),
        }


def find_path(grid: Grid, start: Optional[Cell] = None, goal: Optional[Cell] = None,
              heuristic: Heuristic = euclidean) -> Optional[List[Cell]]:
    """Run a whole search in one call; None when there is no path."""
    search = SearchState(heuristic=heuristic)
    if search.start(grid, start, goal) is not Status.RUNNING:
        return None
    if search.run() is not Status.FOUND:
        return None
    return reconstruct(search.goal_cell, search.start_cell)
