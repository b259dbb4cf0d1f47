#!/usr/bin/env python3
"""
Viewer settings.

- ENV:  GRIDSTAR_MAP, GRIDSTAR_SPEED, GRIDSTAR_HEURISTIC, GRIDSTAR_OBSTACLES,
        GRIDSTAR_LOG_LEVEL, GRIDSTAR_STRICT
- CLI:  --map=, --speed=, --heuristic=, --obstacles=, --log-level=, --strict

CLI flags win over the environment, which wins over the defaults.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from gridstar.core.heuristics import HEURISTICS

logger = logging.getLogger(__name__)

MIN_SPEED = 1
MAX_SPEED = 120
_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class ViewerConfig:
    map_name: str = "01_open_field"
    steps_per_sec: int = 20
    heuristic: str = "euclidean"
    log_level: str = "INFO"
    strict: bool = False
    random_obstacles: int = 25


def _clamp_speed(raw: str, fallback: int) -> int:
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring non-integer speed %r", raw)
        return fallback
    return max(MIN_SPEED, min(MAX_SPEED, value))


def resolve_config(argv: Optional[Sequence[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> ViewerConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    cfg = ViewerConfig()

    values = {
        "map": environ.get("GRIDSTAR_MAP"),
        "speed": environ.get("GRIDSTAR_SPEED"),
        "heuristic": environ.get("GRIDSTAR_HEURISTIC"),
        "obstacles": environ.get("GRIDSTAR_OBSTACLES"),
        "log-level": environ.get("GRIDSTAR_LOG_LEVEL"),
        "strict": environ.get("GRIDSTAR_STRICT"),
    }
    for arg in argv:
        if arg == "--strict":
            values["strict"] = "1"
        elif arg.startswith("--") and "=" in arg:
            key, value = arg[2:].split("=", 1)
            if key in values:
                values[key] = value
            else:
                logger.warning("unknown option --%s", key)

    if values["map"]:
        cfg.map_name = values["map"]
    if values["speed"]:
        cfg.steps_per_sec = _clamp_speed(values["speed"], cfg.steps_per_sec)
    if values["heuristic"]:
        name = values["heuristic"].lower()
        if name in HEURISTICS:
            cfg.heuristic = name
        else:
            logger.warning("unknown heuristic %r, keeping %s", name, cfg.heuristic)
    if values["obstacles"]:
        try:
            cfg.random_obstacles = max(0, int(values["obstacles"]))
        except ValueError:
            logger.warning("ignoring non-integer obstacle count %r", values["obstacles"])
    if values["log-level"]:
        cfg.log_level = values["log-level"].upper()
    if values["strict"]:
        cfg.strict = values["strict"].lower() in _TRUTHY
    return cfg
