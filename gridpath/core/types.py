# gridpath/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any, Iterator

CellKey = Tuple[int, int]  # (col, row)


class InvalidEndpointError(ValueError):
    """Start or target cell is not part of the grid being searched."""


@dataclass(frozen=True, eq=False)
class Cell:
    col: int
    row: int
    x: int
    y: int
    w: int
    h: int
    blocked: bool = False

    @property
    def key(self) -> CellKey:
        return (self.col, self.row)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class Grid:
    """Read-only matrix of cells indexed ``[col][row]``."""

    def __init__(self, columns: List[List[Cell]], unit_size: int):
        if unit_size <= 0:
            raise ValueError(f"unit size must be positive, got {unit_size}")
        row_count = len(columns[0]) if columns else 0
        for col, column in enumerate(columns):
            if len(column) != row_count:
                raise ValueError(f"column {col} has {len(column)} rows, expected {row_count}")
            for row, c in enumerate(column):
                if c.key != (col, row):
                    raise ValueError(f"cell {c.key} stored at position {(col, row)}")
        self._columns = tuple(tuple(column) for column in columns)
        self.unit_size = unit_size
        self.col_count = len(columns)
        self.row_count = row_count

    def __getitem__(self, col: int) -> Tuple[Cell, ...]:
        return self._columns[col]

    def __iter__(self) -> Iterator[Cell]:
        for column in self._columns:
            yield from column

    def __len__(self) -> int:
        return self.col_count * self.row_count

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.col_count and 0 <= row < self.row_count

    def cell(self, col: int, row: int) -> Optional[Cell]:
        if not self.in_bounds(col, row):
            return None
        return self._columns[col][row]

    def contains(self, c: Cell) -> bool:
        return isinstance(c, Cell) and self.cell(c.col, c.row) is not None

    def neighbors4(self, c: Cell) -> List[Cell]:
        """Unblocked orthogonal neighbours of ``c`` (left, up, down, right)."""
        i, j = c.key
        out: List[Cell] = []
        for n in (self.cell(i - 1, j), self.cell(i, j - 1), self.cell(i, j + 1), self.cell(i + 1, j)):
            if n is not None and not n.blocked:
                out.append(n)
        return out

    def cell_at_pixel(self, px: float, py: float) -> Cell:
        """Map a pointer position to a cell, clamping to the grid edges."""
        if not len(self):
            raise ValueError("empty grid has no cells")
        i = int(px // self.unit_size)
        j = int(py // self.unit_size)
        i = min(max(i, 0), self.col_count - 1)
        j = min(max(j, 0), self.row_count - 1)
        return self._columns[i][j]

    @property
    def blocked_count(self) -> int:
        return sum(1 for c in self if c.blocked)

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (self.col_count * self.unit_size, self.row_count * self.unit_size)


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None   # target first, start last
    metrics: Dict[str, Any] = field(default_factory=dict)
