#!/usr/bin/env python3
"""
JSON map files.

    {
      "width": 5, "height": 3,
      "start": [0, 1], "goal": [4, 1],
      "cells": [[0,0,1,0,0],
                [0,0,1,0,0],
                [0,0,0,0,0]]
    }

`cells` is row-major (cells[y][x]); 1 is an obstacle, 0 is free.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from gridstar.core.errors import MapFormatError
from gridstar.core.grid import Grid

logger = logging.getLogger(__name__)

MAP_DIR = Path(__file__).resolve().parents[2] / "maps"


def _coord(data: Dict[str, Any], key: str, width: int, height: int):
    raw = data.get(key)
    if raw is None:
        return None
    try:
        x, y = (int(v) for v in raw)
    except (TypeError, ValueError):
        raise MapFormatError(f"{key} must be a pair of integers, got {raw!r}") from None
    if not (0 <= x < width and 0 <= y < height):
        raise MapFormatError(f"{key} {(x, y)} out of bounds")
    return (x, y)


def parse_map(data: Dict[str, Any]) -> Grid:
    try:
        width = int(data["width"])
        height = int(data["height"])
        cells = data["cells"]
    except KeyError as ex:
        raise MapFormatError(f"map is missing {ex.args[0]!r}") from None
    except (TypeError, ValueError) as ex:
        raise MapFormatError(f"bad map dimensions: {ex}") from None

    if width < 1 or height < 1:
        raise MapFormatError(f"map dimensions must be positive, got {width}x{height}")
    if not isinstance(cells, list) or not all(isinstance(r, list) for r in cells):
        raise MapFormatError("cells must be a list of rows")
    if len(cells) != height or any(len(r) != width for r in cells):
        raise MapFormatError("cells size mismatch")
    try:
        rows = [[int(v) for v in row] for row in cells]
    except (TypeError, ValueError):
        raise MapFormatError("cells must hold integers") from None

    start = _coord(data, "start", width, height)
    goal = _coord(data, "goal", width, height)
    for key, c in (("start", start), ("goal", goal)):
        if c is not None and rows[c[1]][c[0]] == 1:
            raise MapFormatError(f"{key} {c} sits on an obstacle")

    return Grid.from_rows(rows, start=start, goal=goal)


def load_map(path: Union[str, Path]) -> Grid:
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as ex:
        raise MapFormatError(f"{path}: not valid JSON ({ex})") from None
    if not isinstance(data, dict):
        raise MapFormatError(f"{path}: top level must be an object")
    grid = parse_map(data)
    logger.debug("loaded map %s (%dx%d, %d obstacles)", path.name, grid.width, grid.height,
                 grid.obstacle_count())
    return grid


def bundled_maps() -> Dict[str, Path]:
    """Map name -> path for every JSON file shipped in maps/."""
    if not MAP_DIR.is_dir():
        return {}
    return {p.stem: p for p in sorted(MAP_DIR.glob("*.json"))}


def resolve_map(name_or_path: str) -> Path:
    maps = bundled_maps()
    if name_or_path in maps:
        return maps[name_or_path]
    path = Path(name_or_path)
    if path.is_file():
        return path
    raise MapFormatError(f"no bundled map or file named {name_or_path!r}")
