import dataclasses

import pytest

from gridpath.core.generator import grid_from_rows
from gridpath.core.astar import find_path
from gridpath.core.types import Cell, Grid, InvalidEndpointError


def test_cell_identity_is_col_row():
    a = Cell(col=1, row=2, x=10, y=20, w=10, h=10, blocked=False)
    b = Cell(col=1, row=2, x=99, y=99, w=1, h=1, blocked=True)
    c = Cell(col=2, row=1, x=10, y=20, w=10, h=10)

    assert a.key == (1, 2)
    assert a == b
    assert a != c
    assert {a.key: "x"}[b.key] == "x"
    assert len({a, b, c}) == 2


def test_cell_is_frozen():
    a = Cell(col=0, row=0, x=0, y=0, w=1, h=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.blocked = True


def test_grid_shape_and_indexing():
    grid = grid_from_rows(["..#", "#.."], unit_size=5)

    assert grid.col_count == 3
    assert grid.row_count == 2
    assert len(grid) == 6
    assert grid[2][0].blocked
    assert grid[0][1].blocked
    assert grid.cell(2, 0) is grid[2][0]
    assert grid.cell(1, 1).x == 5 and grid.cell(1, 1).y == 5
    assert grid.pixel_size == (15, 10)
    assert grid.blocked_count == 2


def test_out_of_range_cells_are_absent():
    grid = grid_from_rows(["..", ".."])
    assert grid.cell(-1, 0) is None
    assert grid.cell(0, 2) is None
    assert grid.cell(2, 0) is None
    assert not grid.in_bounds(2, 2)


def test_contains_by_coordinates():
    grid = grid_from_rows(["..", ".."])
    assert grid.contains(Cell(col=1, row=1, x=0, y=0, w=1, h=1))
    assert not grid.contains(Cell(col=3, row=0, x=0, y=0, w=1, h=1))
    assert not grid.contains((1, 1))


def test_neighbors_skip_blocked_and_edges():
    grid = grid_from_rows([
        ".#.",
        "...",
        ".#.",
    ])
    assert [c.key for c in grid.neighbors4(grid.cell(1, 1))] == [(0, 1), (2, 1)]
    assert [c.key for c in grid.neighbors4(grid.cell(0, 0))] == [(0, 1)]


def test_cell_at_pixel_clamps():
    grid = grid_from_rows(["...."] * 3, unit_size=10)
    assert grid.cell_at_pixel(0, 0).key == (0, 0)
    assert grid.cell_at_pixel(25, 19.9).key == (2, 1)
    assert grid.cell_at_pixel(1000, 1000).key == (3, 2)
    assert grid.cell_at_pixel(-5, 15).key == (0, 1)


def test_grid_rejects_misplaced_cells():
    a = Cell(col=0, row=0, x=0, y=0, w=1, h=1)
    b = Cell(col=0, row=1, x=0, y=1, w=1, h=1)
    with pytest.raises(ValueError, match="stored at"):
        Grid([[b, a]], 1)
    with pytest.raises(ValueError, match="rows"):
        Grid([[a, b], [Cell(col=1, row=0, x=1, y=0, w=1, h=1)]], 1)
    with pytest.raises(ValueError):
        Grid([[a]], 0)


def test_contains_guards_search_endpoints():
    grid = grid_from_rows(["..", ".."])
    outside = Cell(col=0, row=2, x=0, y=2, w=1, h=1)
    assert not grid.contains(outside)
    with pytest.raises(InvalidEndpointError, match="outside"):
        find_path(grid, grid.cell(0, 0), outside)
