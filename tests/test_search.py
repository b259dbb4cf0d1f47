import pytest

from gridstar.core.errors import NoPath, SearchNotRunning
from gridstar.core.grid import Grid
from gridstar.core.heuristics import manhattan
from gridstar.core.path import path_cost, reconstruct
from gridstar.core.search import SearchState, find_path
from gridstar.core.types import Status, Tag


def _run_checked(search):
    """Step to the end, checking set invariants after every expansion."""
    closed_before = set()
    while search.status is Status.RUNNING:
        search.step()
        open_now = {c.coord for c in search.open_cells()}
        closed_now = {c.coord for c in search.closed_cells()}
        assert not open_now & closed_now
        assert closed_before <= closed_now
        closed_before = closed_now
    return search.status


def test_open_grid_corner_to_corner(open_grid):
    search = SearchState()
    assert search.start(open_grid) is Status.RUNNING
    assert search.run() is Status.FOUND

    goal = open_grid.get(4, 4)
    path = reconstruct(goal, open_grid.get(0, 0))
    assert len(path) == 9
    assert len(path) - 2 == 7
    assert path[0].coord == (0, 0) and path[-1].coord == (4, 4)
    assert path_cost(path) == pytest.approx(8.0)
    assert goal.g == pytest.approx(8.0)


@pytest.mark.parametrize("size,start,goal", [
    ((5, 5), (0, 0), (4, 4)),
    ((5, 5), (2, 3), (2, 0)),
    ((6, 4), (0, 3), (5, 0)),
    ((7, 7), (6, 1), (0, 5)),
    ((1, 6), (0, 0), (0, 5)),
])
def test_empty_grid_path_length_is_one_plus_manhattan(size, start, goal):
    grid = Grid(*size)
    grid.set_start(*start)
    grid.set_goal(*goal)
    path = find_path(grid)
    assert path is not None
    assert len(path) == 1 + abs(start[0] - goal[0]) + abs(start[1] - goal[1])


def test_path_g_cost_never_decreases(walled_grid):
    search = SearchState()
    search.start(walled_grid)
    assert _run_checked(search) is Status.FOUND

    path = reconstruct(search.goal_cell, search.start_cell)
    gs = [c.g for c in path]
    assert gs == sorted(gs)
    assert gs[0] == 0
    # around the wall: down 4, across 6, up 4
    assert len(path) == 15


def test_sealed_grid_is_unreachable(sealed_grid):
    search = SearchState()
    search.start(sealed_grid)
    assert _run_checked(search) is Status.UNREACHABLE
    assert search.steps == 3
    assert search.open_cells() == []
    with pytest.raises(NoPath):
        reconstruct(search.goal_cell, search.start_cell)
    assert find_path(sealed_grid) is None


def test_start_equal_to_goal_is_invalid():
    grid = Grid(3, 3)
    cell = grid.get(1, 1)
    search = SearchState()
    assert search.start(grid, cell, cell) is Status.INVALID_ENDPOINTS
    assert search.steps == 0
    assert search.open_cells() == []
    assert search.step() is Status.INVALID_ENDPOINTS
    assert search.steps == 0


def test_missing_endpoints_are_invalid():
    grid = Grid(3, 3)
    assert SearchState().start(grid) is Status.INVALID_ENDPOINTS
    assert SearchState().start(grid, grid.get(0, 0), None) is Status.INVALID_ENDPOINTS


def test_obstacle_endpoint_is_invalid():
    grid = Grid(3, 3)
    grid.set_obstacle(2, 2, True)
    assert SearchState().start(grid, grid.get(0, 0), grid.get(2, 2)) is Status.INVALID_ENDPOINTS


def test_endpoint_from_another_grid_is_invalid():
    grid = Grid(3, 3)
    stranger = Grid(3, 3).get(2, 2)
    assert SearchState().start(grid, grid.get(0, 0), stranger) is Status.INVALID_ENDPOINTS


def test_first_step_opens_neighbours_in_fixed_order():
    grid = Grid(3, 3)
    grid.set_start(1, 1)
    grid.set_goal(2, 2)
    search = SearchState()
    search.start(grid)
    search.step()

    assert search.last_step.current == (1, 1)
    assert search.last_step.closed == [(1, 1)]
    assert search.last_step.opened == [(0, 1), (2, 1), (1, 0), (1, 2)]
    for coord in search.last_step.opened:
        cell = grid.get(*coord)
        assert cell.parent is grid.get(1, 1)
        assert cell.g == pytest.approx(1.0)
        assert cell.tag is Tag.OPEN


def test_tags_follow_the_search(open_grid):
    search = SearchState()
    search.start(open_grid)
    search.run(max_steps=4)

    start = open_grid.get(0, 0)
    assert search.in_closed(start)
    assert start.tag is Tag.START
    for c in search.closed_cells():
        if c != start:
            assert c.tag is Tag.CLOSED
    for c in search.open_cells():
        assert c.tag is Tag.OPEN
    assert open_grid.get(4, 4).tag is Tag.GOAL


def test_found_does_not_paint_the_path(open_grid):
    search = SearchState()
    search.start(open_grid)
    search.run()
    assert not any(c.tag is Tag.PATH for c in open_grid.cells())
    assert not search.in_closed(open_grid.get(4, 4))


def test_same_grid_gives_same_route_every_time(walled_grid):
    first = [c.coord for c in find_path(walled_grid)]
    walled_grid.clear()
    second = [c.coord for c in find_path(walled_grid)]
    assert first == second


def test_manhattan_heuristic_finds_an_equally_short_path(walled_grid):
    path = find_path(walled_grid, heuristic=manhattan)
    assert len(path) == 15


def test_step_on_idle_search_is_a_noop():
    search = SearchState()
    assert search.step() is Status.IDLE
    assert search.steps == 0


def test_strict_mode_refuses_to_step_a_finished_search(open_grid):
    search = SearchState(strict=True)
    search.start(open_grid)
    search.run()
    with pytest.raises(SearchNotRunning):
        search.step()


def test_cancel_stops_further_effects(open_grid):
    search = SearchState()
    search.start(open_grid)
    search.step()
    before = search.metrics()
    search.cancel()

    assert search.status is Status.IDLE
    assert search.step() is Status.IDLE
    assert search.metrics() == before


def test_clear_resets_search_and_grid(open_grid):
    search = SearchState()
    search.start(open_grid)
    search.run(max_steps=5)
    search.clear()

    assert search.status is Status.IDLE
    assert search.visited_cells() == []
    assert all(c.tag in (Tag.BLANK, Tag.START, Tag.GOAL) for c in open_grid.cells())


def test_run_respects_max_steps(open_grid):
    search = SearchState()
    search.start(open_grid)
    assert search.run(max_steps=2) is Status.RUNNING
    assert search.steps == 2
    assert search.metrics()["popped"] == 2


def test_visited_cells_lists_open_then_closed(open_grid):
    search = SearchState()
    search.start(open_grid)
    search.step()
    visited = [c.coord for c in search.visited_cells()]
    assert visited == [(1, 0), (0, 1), (0, 0)]


def test_restart_after_clear_matches_fresh_run(walled_grid):
    search = SearchState()
    search.start(walled_grid)
    search.run()
    first = search.metrics()

    walled_grid.clear()
    search.start(walled_grid)
    search.run()
    assert search.metrics() == first


def test_blocking_the_open_frontier_mid_search_ends_unreachable(open_grid):
    search = SearchState()
    search.start(open_grid)
    search.step()
    assert search.last_step.opened == [(1, 0), (0, 1)]

    open_grid.set_obstacle(1, 0)
    open_grid.set_obstacle(0, 1)
    assert search.run() is Status.UNREACHABLE
    assert search.open_cells() == []
    assert open_grid.get(1, 0).tag is Tag.OBSTACLE


def _overrates_east_of_start(cell, goal):
    # exact distance from (1, 0) to (2, 2); every other cell looks free
    return 3.0 if cell.coord == (1, 0) else 0.0


def test_cheaper_route_to_an_open_cell_replaces_its_entry():
    grid = Grid(3, 3)
    grid.set_start(0, 0)
    grid.set_goal(2, 2)
    search = SearchState(heuristic=_overrates_east_of_start)
    search.start(grid)

    # (2, 0) is first opened the long way round, through (2, 1)
    search.run(max_steps=6)
    corner = grid.get(2, 0)
    assert search.in_open(corner)
    assert corner.parent is grid.get(2, 1)
    assert corner.g == pytest.approx(4.0)

    # expanding (1, 0) finds the short way
    search.step()
    assert search.last_step.current == (1, 0)
    assert search.last_step.opened == []
    assert corner.parent is grid.get(1, 0)
    assert corner.g == pytest.approx(2.0)
    assert search.in_open(corner)

    assert search.run() is Status.FOUND
    # the outdated entry for (2, 0) is skipped, not expanded a second time
    assert search.steps == 9
    assert search.metrics()["popped"] == 9
    assert search.in_closed(corner)

    path = reconstruct(search.goal_cell, search.start_cell)
    assert path_cost(path) == pytest.approx(4.0)
    assert [c.coord for c in path] == [(0, 0), (0, 1), (1, 1), (2, 1), (2, 2)]


def test_explicit_endpoints_take_over_the_grid_designation(open_grid):
    search = SearchState()
    start, goal = open_grid.get(1, 1), open_grid.get(3, 3)
    assert search.start(open_grid, start, goal) is Status.RUNNING

    assert open_grid.start == (1, 1) and open_grid.goal == (3, 3)
    assert open_grid.get(0, 0).tag is Tag.BLANK
    assert open_grid.get(4, 4).tag is Tag.BLANK
    assert [c.coord for c in open_grid.cells() if c.tag is Tag.START] == [(1, 1)]
    assert [c.coord for c in open_grid.cells() if c.tag is Tag.GOAL] == [(3, 3)]

    assert search.run() is Status.FOUND
    path = reconstruct(goal)
    assert path[0] is start
