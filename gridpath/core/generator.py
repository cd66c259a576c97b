# gridpath/core/generator.py
#!/usr/bin/env python3
"""
Grid builders: random mazes, hand-written rows, and JSON map files.

Map file format:
    {"unit": 10, "cells": [[0, 1, 0], [0, 0, 0]]}
``cells`` is [row][col]; 1 marks a blocked cell.
"""

import json
import logging
import random
from pathlib import Path
from typing import List, Optional, Sequence, Union

from gridpath.core.types import Cell, Grid

logger = logging.getLogger(__name__)

BLOCK_CHARS = "#1"


def _make_cell(col: int, row: int, unit_size: int, blocked: bool) -> Cell:
    return Cell(col=col, row=row, x=col * unit_size, y=row * unit_size,
                w=unit_size, h=unit_size, blocked=blocked)


def generate_grid(width: int, height: int, unit_size: int, block_prob: float,
                  rng: Optional[random.Random] = None) -> Grid:
    """Each cell is blocked independently with probability ``block_prob``."""
    if unit_size <= 0:
        raise ValueError(f"unit size must be positive, got {unit_size}")
    if not 0.0 <= block_prob <= 1.0:
        raise ValueError(f"block probability must be in [0, 1], got {block_prob}")
    rand = rng.random if rng is not None else random.random

    col_count = int(width // unit_size)
    row_count = int(height // unit_size)
    columns: List[List[Cell]] = []
    for i in range(col_count):
        columns.append([_make_cell(i, j, unit_size, rand() < block_prob) for j in range(row_count)])

    grid = Grid(columns, unit_size)
    logger.debug("generated %dx%d grid (unit=%d), %d blocked",
                 grid.col_count, grid.row_count, unit_size, grid.blocked_count)
    return grid


def grid_from_rows(rows: Sequence[Union[str, Sequence[int]]], unit_size: int = 1) -> Grid:
    """Build a grid from rows of "#."-strings or 0/1 lists ([row][col])."""
    if unit_size <= 0:
        raise ValueError(f"unit size must be positive, got {unit_size}")
    width = len(rows[0]) if rows else 0
    for j, r in enumerate(rows):
        if len(r) != width:
            raise ValueError(f"row {j} has {len(r)} cells, expected {width}")

    def is_block(v) -> bool:
        return v in BLOCK_CHARS if isinstance(v, str) else bool(v)

    columns = [
        [_make_cell(i, j, unit_size, is_block(rows[j][i])) for j in range(len(rows))]
        for i in range(width)
    ]
    return Grid(columns, unit_size)


def load_map(path: Union[str, Path]) -> Grid:
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict) or "cells" not in data:
        raise ValueError(f"{path}: expected an object with a \"cells\" list")
    unit = data.get("unit", 1)
    if not isinstance(unit, int) or isinstance(unit, bool):
        raise ValueError(f"{path}: unit must be an integer, got {unit!r}")
    cells = data["cells"]
    if not isinstance(cells, list) or not cells:
        raise ValueError(f"{path}: map has no cells")
    for j, r in enumerate(cells):
        if not isinstance(r, (list, str)):
            raise ValueError(f"{path}: row {j} must be a list, got {type(r).__name__}")
    return grid_from_rows(cells, unit)


def pick_start_cell(grid: Grid, rng: Optional[random.Random] = None) -> Cell:
    """Uniformly random cell, blocked or not."""
    if not len(grid):
        raise ValueError("cannot pick a start cell in an empty grid")
    r = rng if rng is not None else random
    return grid[r.randrange(grid.col_count)][r.randrange(grid.row_count)]
