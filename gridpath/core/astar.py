# gridpath/core/astar.py
#!/usr/bin/env python3
"""
A* over a 4-connected cell grid: one expansion per step() for animation,
or run to completion through find_path().

Algorithm API used by the viewer:
- init(grid, start, target) - reset() - step() -> StepResult - run()

Cost and heuristic:
- Both are the Manhattan distance between pixel positions. With unit-cost
  orthogonal moves this keeps h admissible and consistent, so the first time
  the target is popped its g is optimal.

Frontier selection:
- Default: linear scan for the lowest f, first-inserted member wins ties.
- use_heap=True: binary heap on (f, seq) where seq is the order of first
  entry into the open set. Same tie-break, O(log V) pops.

Returned paths run target first, start last.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple
import heapq
import logging
from math import inf

from gridpath.core.types import Cell, CellKey, Grid, InvalidEndpointError, StepResult

logger = logging.getLogger(__name__)


def cost(a: Cell, b: Cell) -> int:
    """Manhattan distance in pixels. Used as both edge cost and heuristic."""
    return abs(a.x - b.x) + abs(a.y - b.y)


heuristic = cost


@dataclass
class AStarAlgo:
    name: str = "A*"
    use_heap: bool = False

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    target: Optional[Cell] = None
    open_set: Dict[CellKey, Cell] = field(default_factory=dict)   # insertion-ordered frontier
    open_seq: Dict[CellKey, int] = field(default_factory=dict)
    open_pq: List[Tuple[int, int, CellKey]] = field(default_factory=list)  # (f, seq, key)
    closed_set: Set[CellKey] = field(default_factory=set)
    came_from: Dict[CellKey, Cell] = field(default_factory=dict)
    g: Dict[CellKey, int] = field(default_factory=dict)
    f: Dict[CellKey, int] = field(default_factory=dict)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    path: Optional[List[Cell]] = None
    seq: int = 0

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Cell, target: Cell) -> None:
        """Bind a grid and endpoints, then seed the search."""
        self.grid = grid
        self.start = self._resolve_endpoint(grid, start, "start")
        self.target = self._resolve_endpoint(grid, target, "target")
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed with the start cell."""
        if self.grid is None:
            return
        self.open_set.clear()
        self.open_seq.clear()
        self.open_pq.clear()
        self.closed_set.clear()
        self.came_from.clear()
        self.g.clear()
        self.f.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.path = None
        self.seq = 0

        s = self.start
        self._open(s)
        self.g[s.key] = 0
        self.f[s.key] = heuristic(s, self.target)
        self._push(s)

    # -------------------- helpers --------------------

    @staticmethod
    def _resolve_endpoint(grid: Grid, c: Cell, label: str) -> Cell:
        if not isinstance(c, Cell):
            raise InvalidEndpointError(f"{label} must be a Cell, got {type(c).__name__}")
        if not grid.contains(c):
            raise InvalidEndpointError(
                f"{label} {c.key} is outside the {grid.col_count}x{grid.row_count} grid"
            )
        return grid.cell(c.col, c.row)

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _open(self, c: Cell) -> None:
        if c.key not in self.open_set:
            self.open_set[c.key] = c
            self.open_seq[c.key] = self._bump()

    def _push(self, c: Cell) -> None:
        if self.use_heap:
            heapq.heappush(self.open_pq, (self.f[c.key], self.open_seq[c.key], c.key))

    def _select(self) -> Cell:
        if not self.use_heap:
            # min() keeps the first of equal keys, i.e. the earliest inserted
            return min(self.open_set.values(), key=lambda c: self.f[c.key])
        while True:
            f_u, _, k = heapq.heappop(self.open_pq)
            # stale: already closed, or f improved since this entry was pushed
            if k in self.open_set and f_u == self.f[k]:
                return self.open_set[k]

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = [end]
        cur = end
        while cur.key in self.came_from:
            cur = self.came_from[cur.key]
            path.append(cur)
        return path

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion step:
          - Pick the lowest-f frontier cell.
          - If it is the target, reconstruct and finish.
          - Else close it and relax its open neighbours.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=list(self.path), metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.open_set:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u = self._select()
        self.popped_count += 1

        if u.key == self.target.key:
            self.done = True
            self.path = self._reconstruct_path(u)
            return StepResult(status="done", current=u, path=list(self.path), metrics=self._metrics())

        del self.open_set[u.key]
        self.closed_set.add(u.key)

        opened_now: List[Cell] = []
        for v in self.grid.neighbors4(u):
            if v.key in self.closed_set:
                continue
            if v.key not in self.open_set:
                self._open(v)
                opened_now.append(v)
            alt = self.g[u.key] + cost(u, v)
            if alt >= self.g.get(v.key, inf):
                continue
            self.came_from[v.key] = u
            self.g[v.key] = alt
            self.f[v.key] = alt + heuristic(v, self.target)
            self._push(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u, metrics=self._metrics())

    def run(self) -> List[Cell]:
        """Step until the search finishes. Empty list when unreachable."""
        if self.grid is None:
            raise RuntimeError("init() must be called before run()")
        while True:
            res = self.step()
            if res.status == "done":
                logger.debug("%s: %s -> %s in %d pops, %d cells",
                             self.name, self.start.key, self.target.key, self.popped_count, len(res.path))
                return res.path
            if res.status == "no_path":
                logger.debug("%s: %s unreachable from %s after %d pops",
                             self.name, self.target.key, self.start.key, self.popped_count)
                return []

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": len(self.path) if self.path else 0,
            "total_cost": self.g.get(self.target.key) if self.done else None,
        }


def find_path(grid: Grid, start: Cell, target: Cell, use_heap: bool = False) -> List[Cell]:
    """Shortest path from ``start`` to ``target``, listed target first.

    Raises InvalidEndpointError if either endpoint is not in ``grid``.
    Returns an empty list when the target cannot be reached.
    """
    algo = AStarAlgo(use_heap=use_heap)
    algo.init(grid, start, target)
    return algo.run()
