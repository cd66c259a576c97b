# gridpath/app/viewer.py
#!/usr/bin/env python3
"""
Grid Pathfinder Viewer: hover to route, SPACE to watch the search

- Mouse:
    move         -> target = cell under the pointer; shortest path from the
                    start cell is highlighted (endpoints excluded)
- Keyboard:
    [SPACE]      -> animate A* toward the current target / pause
    [N]          -> single step
    [G]          -> generate a new grid
    [R]          -> pick a new start cell
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Settings: see gridpath.core.config (GRIDPATH_* env vars, --key=value CLI).
"""

# --- bootstrap import path so `from gridpath...` works when run as a script ---
import sys, os, time, random, logging
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------------

from typing import List, Optional, Set, Tuple
import pygame

from gridpath.core.types import Cell, CellKey, Grid
from gridpath.core.astar import AStarAlgo, find_path
from gridpath.core.generator import generate_grid, load_map, pick_start_cell
from gridpath.core.config import MazeConfig, resolve_config

logger = logging.getLogger(__name__)

PANEL_W = 220
FONT_NAME = None  # default pygame font

# Colors
WHITE        = (255, 255, 255)
BLOCK_GRAY   = ( 70,  72,  76)
STROKE_GRAY  = (190, 190, 190)
START_BLUE   = (  0,   0, 255)
PATH_GREEN   = (  0, 255,   0)
OPEN_CYAN_A  = (  0, 150, 255, 110)
CLOSED_MAG_A = (255,   0, 120,  90)

CARD_BG      = ( 24,  28,  36)
TEXT_LIGHT   = (230, 235, 240)
ACCENT_GOLD  = (255, 210,   0)


def build_grid(cfg: MazeConfig, rng: Optional[random.Random]) -> Grid:
    if cfg.map_path:
        return load_map(cfg.map_path)
    return generate_grid(cfg.width, cfg.height, cfg.unit_size, cfg.block_prob, rng=rng)


# ---------- Viewer ----------
class Viewer:
    def __init__(self, cfg: MazeConfig):
        pygame.init()

        self.cfg = cfg
        self.rng = random.Random(cfg.seed) if cfg.seed is not None else None
        self.grid = build_grid(cfg, self.rng)
        self.start = pick_start_cell(self.grid, self.rng)

        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_w, grid_h = self.grid.pixel_size
        self.screen = pygame.display.set_mode((grid_w + PANEL_W, max(grid_h, 240)))
        pygame.display.set_caption("Grid Pathfinder")

        self.target: Optional[Cell] = None
        self.path: List[Cell] = []
        self.open_set: Set[CellKey] = set()
        self.closed_set: Set[CellKey] = set()
        self._pending_mouse: Optional[Tuple[int, int]] = None

        self.algo: Optional[AStarAlgo] = None
        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 20
        self.state = "Hover"
        self._last_step_t = 0.0
        self._last_metrics = {}

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            elif self._pending_mouse is not None:
                self.set_target_from_pixel(*self._pending_mouse)
            self._pending_mouse = None
            self._draw()
            self.clock.tick(60)

    # ---------- hover mode ----------
    def set_target_from_pixel(self, px: int, py: int) -> None:
        self.target = self.grid.cell_at_pixel(px, py)
        self._reset_overlays()
        if self.target.blocked:
            self.state = "Blocked"
            return
        full = find_path(self.grid, self.start, self.target, use_heap=self.cfg.use_heap)
        self.path = full[1:-1]
        self.state = "Hover" if full else "No path"

    # ---------- animation mode ----------
    def start_animation(self) -> None:
        if self.target is None or self.target.blocked:
            return
        self._reset_overlays()
        self.algo = AStarAlgo(use_heap=self.cfg.use_heap)
        self.algo.init(self.grid, self.start, self.target)
        self.running = True
        self.state = "Running"

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.steps_per_sec)
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self.do_step()

    def do_step(self) -> None:
        if self.algo is None:
            return
        res = self.algo.step()
        for c in res.opened: self.open_set.add(c.key)
        for c in res.closed:
            self.closed_set.add(c.key)
            self.open_set.discard(c.key)
        if res.path is not None: self.path = res.path[1:-1]
        if res.status == "done":
            self.state = "Done"; self.running = False
        elif res.status == "no_path":
            self.state = "No path"; self.running = False
        if res.metrics:
            self._last_metrics = res.metrics

    def _reset_overlays(self):
        self.open_set.clear()
        self.closed_set.clear()
        self.path = []
        self.algo = None
        self.running = False
        self._last_metrics = {}

    def regenerate(self) -> None:
        self.grid = build_grid(self.cfg, self.rng)
        self.start = pick_start_cell(self.grid, self.rng)
        self.target = None
        self._reset_overlays()
        self.state = "Hover"
        logger.info("new %dx%d grid, start %s", self.grid.col_count, self.grid.row_count, self.start.key)

    def repick_start(self) -> None:
        self.start = pick_start_cell(self.grid, self.rng)
        self.target = None
        self._reset_overlays()
        self.state = "Hover"

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    if self.algo is None or self.state in ("Done", "No path"):
                        self.start_animation()
                    else:
                        self.running = not self.running
                        self.state = "Running" if self.running else "Paused"
                elif e.key == pygame.K_n:
                    if self.algo is None:
                        self.start_animation()
                        self.running = False
                    self.do_step()
                elif e.key == pygame.K_g:
                    self.regenerate()
                elif e.key == pygame.K_r:
                    self.repick_start()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self.steps_per_sec = min(120, self.steps_per_sec + 5)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self.steps_per_sec = max(1, self.steps_per_sec - 5)
            elif e.type == pygame.MOUSEMOTION:
                grid_w, grid_h = self.grid.pixel_size
                if e.pos[0] < grid_w:
                    self._pending_mouse = e.pos

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill(CARD_BG)
        self._draw_grid()
        self._draw_metrics()
        pygame.display.flip()

    def _fill_cell(self, c: Cell, color):
        rect = pygame.Rect(c.x, c.y, c.w, c.h)
        if len(color) == 4:
            s = pygame.Surface(rect.size, pygame.SRCALPHA); s.fill(color)
            self.screen.blit(s, rect.topleft)
        else:
            pygame.draw.rect(self.screen, color, rect)

    def _draw_grid(self):
        for c in self.grid:
            rect = pygame.Rect(c.x, c.y, c.w, c.h)
            pygame.draw.rect(self.screen, BLOCK_GRAY if c.blocked else WHITE, rect)
            pygame.draw.rect(self.screen, STROKE_GRAY, rect, 1)

        # overlays
        for key in self.closed_set:
            self._fill_cell(self.grid.cell(*key), CLOSED_MAG_A)
        for key in self.open_set:
            self._fill_cell(self.grid.cell(*key), OPEN_CYAN_A)

        for c in self.path:
            self._fill_cell(c, PATH_GREEN)
        if self.target is not None:
            self._fill_cell(self.target, PATH_GREEN)
        self._fill_cell(self.start, START_BLUE)

    def _draw_metrics(self):
        x0 = self.grid.pixel_size[0] + 14
        y0 = 12

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("A* Pathfinder", big=True, color=ACCENT_GOLD)
        line(f"Grid: {self.grid.col_count}x{self.grid.row_count}")
        line(f"Start: {self.start.key}")
        line(f"Target: {self.target.key if self.target else '-'}")
        line(f"State: {self.state}")
        m = self._last_metrics
        if m:
            line("-" * 20)
            line(f"Popped: {m.get('popped', 0)}")
            line(f"Open: {m.get('open_size', 0)}")
            line(f"Closed: {m.get('closed_count', 0)}")
            line(f"Path Len: {m.get('path_len', 0)}")
            if m.get("total_cost") is not None:
                line(f"Total Cost: {m['total_cost']}")
        line("-" * 20)
        line(f"Speed: {self.steps_per_sec} steps/s")
        line(f"Frontier: {'heap' if self.cfg.use_heap else 'scan'}")


# ---------- main ----------
def main(argv: Optional[List[str]] = None):
    try:
        level_name = os.getenv("GRIDPATH_LOG", "WARNING").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"unknown log level {level_name!r} in GRIDPATH_LOG")
        logging.basicConfig(level=level,
                            format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
        cfg = resolve_config(sys.argv[1:] if argv is None else argv)
        viewer = Viewer(cfg)
    except (ValueError, KeyError, OSError) as ex:
        print(f"Failed to start viewer: {ex}")
        sys.exit(1)
    viewer.run()

if __name__ == "__main__":
    main()
