import pytest

from gridstar.core.grid import Grid


@pytest.fixture
def open_grid():
    """5x5 grid, no obstacles, start (0,0), goal (4,4)."""
    grid = Grid(5, 5)
    grid.set_start(0, 0)
    grid.set_goal(4, 4)
    return grid


@pytest.fixture
def sealed_grid():
    """3x3 grid whose middle column cuts the start off from the goal."""
    return Grid.from_rows(
        [".#.",
         ".#.",
         ".#."],
        start=(0, 0), goal=(2, 2),
    )


@pytest.fixture
def walled_grid():
    """7x5 grid with a wall that has a single gap at the bottom."""
    return Grid.from_rows(
        ["...#...",
         "...#...",
         "...#...",
         "...#...",
         "......."],
        start=(0, 0), goal=(6, 0),
    )
