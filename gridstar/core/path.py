#!/usr/bin/env python3
from typing import List, Optional, Set

from gridstar.core.cell import Cell
from gridstar.core.errors import NoPath
from gridstar.core.heuristics import distance
from gridstar.core.types import Tag


def reconstruct(goal: Cell, start: Optional[Cell] = None) -> List[Cell]:
    """
    Follow parent links from `goal` back to the root and return the route
    start-to-goal, both endpoints included.

    The root must be `start` when one is given, otherwise a cell tagged
    Start. Anything else means the parent graph is not a finished search.
    """
    path: List[Cell] = []
    seen: Set[int] = set()
    cur: Optional[Cell] = goal
    while cur is not None:
        if cur.index in seen:
            raise NoPath(f"parent links loop at {cur.coord}")
        seen.add(cur.index)
        path.append(cur)
        cur = cur.parent

    root = path[-1]
    if start is not None:
        if root != start:
            raise NoPath(f"parent chain from {goal.coord} ends at {root.coord}, not at start {start.coord}")
    elif root.tag is not Tag.START:
        raise NoPath(f"parent chain from {goal.coord} ends at {root.coord}, which is not a start cell")
    if len(path) < 2:
        raise NoPath(f"{goal.coord} has no route back to a start cell")

    path.reverse()
    return path


def interior(path: List[Cell]) -> List[Cell]:
    """The route without its two endpoints."""
    return path[1:-1]


def mark_path(path: List[Cell]) -> List[Cell]:
    cells = interior(path)
    for c in cells:
        c.mark_path()
    return cells


def path_cost(path: List[Cell]) -> float:
    return sum(distance(a, b) for a, b in zip(path, path[1:]))
