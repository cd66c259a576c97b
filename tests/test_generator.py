import json
import random
from pathlib import Path

import pytest

from gridpath.core.generator import generate_grid, grid_from_rows, load_map, pick_start_cell

MAPS_DIR = Path(__file__).resolve().parents[1] / "maps"


def test_dimensions_are_floor_divided():
    grid = generate_grid(105, 47, 10, 0.0)
    assert grid.col_count == 10
    assert grid.row_count == 4
    assert grid.cell(9, 3).x == 90 and grid.cell(9, 3).y == 30
    assert grid.cell(9, 3).w == 10 and grid.cell(9, 3).h == 10


def test_probability_extremes():
    assert generate_grid(50, 50, 5, 0.0).blocked_count == 0
    full = generate_grid(50, 50, 5, 1.0)
    assert full.blocked_count == len(full) == 100


def test_seeded_generation_is_reproducible():
    a = generate_grid(200, 100, 10, 0.3, rng=random.Random(42))
    b = generate_grid(200, 100, 10, 0.3, rng=random.Random(42))
    assert [c.blocked for c in a] == [c.blocked for c in b]
    assert 0 < a.blocked_count < len(a)


@pytest.mark.parametrize("unit,prob", [(0, 0.3), (-4, 0.3), (10, -0.1), (10, 1.5)])
def test_bad_generation_arguments(unit, prob):
    with pytest.raises(ValueError):
        generate_grid(100, 100, unit, prob)


def test_grid_from_rows_accepts_ints_and_strings():
    a = grid_from_rows([[0, 1, 0], [0, 0, 1]], unit_size=3)
    b = grid_from_rows([".#.", "..#"], unit_size=3)
    assert [(c.key, c.blocked) for c in a] == [(c.key, c.blocked) for c in b]


def test_grid_from_rows_rejects_ragged_rows():
    with pytest.raises(ValueError, match="row 1"):
        grid_from_rows(["...", ".."])


def test_load_map(tmp_path):
    p = tmp_path / "tiny.json"
    p.write_text(json.dumps({"unit": 8, "cells": [[0, 1], [0, 0], [1, 0]]}))
    grid = load_map(p)

    assert (grid.col_count, grid.row_count) == (2, 3)
    assert grid.unit_size == 8
    assert grid.cell(1, 0).blocked
    assert grid.cell(0, 2).blocked
    assert grid.cell(1, 2).x == 8 and grid.cell(1, 2).y == 16


def test_load_map_without_cells(tmp_path):
    p = tmp_path / "empty.json"
    p.write_text(json.dumps({"unit": 8, "cells": []}))
    with pytest.raises(ValueError):
        load_map(p)


@pytest.mark.parametrize("name", ["gap_row.json", "walled_room.json"])
def test_bundled_maps_load(name):
    grid = load_map(MAPS_DIR / name)
    assert grid.unit_size == 24
    assert 0 < grid.blocked_count < len(grid)


def test_pick_start_cell_stays_in_grid():
    grid = generate_grid(70, 30, 10, 0.5, rng=random.Random(3))
    rng = random.Random(9)
    for _ in range(50):
        c = pick_start_cell(grid, rng)
        assert grid.cell(c.col, c.row) is c


def test_pick_start_cell_empty_grid():
    grid = generate_grid(5, 5, 10, 0.3)
    with pytest.raises(ValueError):
        pick_start_cell(grid)


@pytest.mark.parametrize("payload", [
    [[0, 1], [0, 0]],
    {"cells": [1, 2]},
    {"unit": "big", "cells": [[0]]},
    {"unit": 4},
    {"unit": 4, "cells": "0101"},
])
def test_load_map_rejects_malformed_shapes(tmp_path, payload):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps(payload))
    with pytest.raises(ValueError):
        load_map(p)
