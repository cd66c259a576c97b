# gridpath/core/config.py
#!/usr/bin/env python3
"""
Runtime settings for the viewer.

Resolution order (later wins): defaults -> environment -> CLI.
- ENV: GRIDPATH_UNIT, GRIDPATH_BLOCK, GRIDPATH_WIDTH, GRIDPATH_HEIGHT,
       GRIDPATH_SEED, GRIDPATH_MAP, GRIDPATH_HEAP
- CLI: --unit=, --block=, --width=, --height=, --seed=, --map=, --heap
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

DEFAULT_UNIT = 10
DEFAULT_BLOCK = 0.3
DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 640

ENV_PREFIX = "GRIDPATH_"
_FIELDS = ("unit", "block", "width", "height", "seed", "map", "heap")


@dataclass
class MazeConfig:
    unit_size: int = DEFAULT_UNIT
    block_prob: float = DEFAULT_BLOCK
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed: Optional[int] = None
    map_path: Optional[str] = None
    use_heap: bool = False

    def __post_init__(self):
        if self.unit_size <= 0:
            raise ValueError(f"unit size must be positive, got {self.unit_size}")
        if not 0.0 <= self.block_prob <= 1.0:
            raise ValueError(f"block probability must be in [0, 1], got {self.block_prob}")
        if self.width < self.unit_size or self.height < self.unit_size:
            raise ValueError(f"window {self.width}x{self.height} is smaller than one cell")


def _as_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _as_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on", "")


def resolve_config(argv: Optional[Sequence[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> MazeConfig:
    argv = argv if argv is not None else []
    environ = environ if environ is not None else os.environ

    raw = {}
    for key in _FIELDS:
        v = environ.get(ENV_PREFIX + key.upper())
        if v is not None:
            raw[key] = v
    for arg in argv:
        if not arg.startswith("--"):
            continue
        key, _, value = arg[2:].partition("=")
        if key in _FIELDS:
            raw[key] = value

    cfg = {}
    if "unit" in raw:
        cfg["unit_size"] = _as_int("unit", raw["unit"])
    if "block" in raw:
        cfg["block_prob"] = _as_float("block", raw["block"])
    if "width" in raw:
        cfg["width"] = _as_int("width", raw["width"])
    if "height" in raw:
        cfg["height"] = _as_int("height", raw["height"])
    if raw.get("seed"):
        cfg["seed"] = _as_int("seed", raw["seed"])
    if raw.get("map"):
        cfg["map_path"] = raw["map"]
    if "heap" in raw:
        cfg["use_heap"] = _as_bool(raw["heap"])
    return MazeConfig(**cfg)
