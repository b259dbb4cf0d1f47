#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

Coord = Tuple[int, int]  # (col, row)


class Tag(str, Enum):
    """What a renderer draws for a cell."""
    BLANK = "blank"
    OBSTACLE = "obstacle"
    START = "start"
    GOAL = "goal"
    OPEN = "open"
    CLOSED = "closed"
    PATH = "path"


class Status(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FOUND = "found"
    UNREACHABLE = "unreachable"
    INVALID_ENDPOINTS = "invalid_endpoints"

    @property
    def terminal(self) -> bool:
        return self in (Status.FOUND, Status.UNREACHABLE, Status.INVALID_ENDPOINTS)


@dataclass
class StepResult:
    status: Status
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    current: Optional[Coord] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
