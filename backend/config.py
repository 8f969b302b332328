# backend/config.py

import os
from dataclasses import dataclass

import yaml

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


@dataclass
class GameConfig:
    rows: int = 10
    cols: int = 10
    num_mines: int = 6
    clock_interval: float = 1.0
    ghost_interval: float = 4.0
    max_ghosts: int = 4
    max_ghosts_per_department: int = 2


def load_config(section: str = "default", config_path: str = DEFAULT_CONFIG_PATH) -> GameConfig:
    """
    Load a named section from the YAML config file.

    A missing file gives the built-in defaults; missing keys inside a section
    fall back to the defaults as well.
    """
    if not os.path.exists(config_path):
        return GameConfig()

    with open(config_path, "r") as f:
        all_configs = yaml.safe_load(f) or {}

    if section not in all_configs:
        raise KeyError(
            f"Unknown config section '{section}'. "
            f"Available: {sorted(all_configs.keys())}"
        )
    cfg = all_configs[section] or {}

    board_cfg = cfg.get("board", {})
    timers_cfg = cfg.get("timers", {})
    ghosts_cfg = cfg.get("ghosts", {})
    defaults = GameConfig()

    return GameConfig(
        rows=int(board_cfg.get("rows", defaults.rows)),
        cols=int(board_cfg.get("cols", defaults.cols)),
        num_mines=int(board_cfg.get("num_mines", defaults.num_mines)),
        clock_interval=float(timers_cfg.get("clock_interval", defaults.clock_interval)),
        ghost_interval=float(timers_cfg.get("ghost_interval", defaults.ghost_interval)),
        max_ghosts=int(ghosts_cfg.get("max_total", defaults.max_ghosts)),
        max_ghosts_per_department=int(
            ghosts_cfg.get("max_per_department", defaults.max_ghosts_per_department)
        ),
    )
