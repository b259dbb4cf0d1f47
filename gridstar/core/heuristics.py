#!/usr/bin/env python3
"""
Distance functions between two cells.

Both are admissible and consistent on a 4-connected grid with unit step
cost, which keeps the closed set final.
"""

from math import sqrt
from typing import Callable, Dict

from gridstar.core.cell import Cell

Heuristic = Callable[[Cell, Cell], float]


def euclidean(a: Cell, b: Cell) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return sqrt(dx * dx + dy * dy)


def manhattan(a: Cell, b: Cell) -> float:
    return float(abs(a.x - b.x) + abs(a.y - b.y))


# step cost between adjacent cells
distance = euclidean

HEURISTICS: Dict[str, Heuristic] = {
    "euclidean": euclidean,
    "manhattan": manhattan,
}


def by_name(name: str) -> Heuristic:
    try:
        return HEURISTICS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown heuristic {name!r}; choose from {sorted(HEURISTICS)}") from None
