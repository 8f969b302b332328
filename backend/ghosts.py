# backend/ghosts.py

import logging
import random
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class Department(Enum):
    """Workshops that send interference signals onto the board."""
    PUBLICATION = ("publication", "#EC4899")
    PRINTMAKING = ("printmaking", "#F59E0B")

    def __init__(self, label, color):
        self.label = label
        self.color = color


class Strength(Enum):
    # value is the marker opacity the presentation layer uses
    LOW = 0.5
    HIGH = 0.9


@dataclass(frozen=True)
class GhostAssignment:
    department: Department
    strength: Strength

    def to_dict(self) -> dict:
        return {
            "department": self.department.label,
            "color": self.department.color,
            "strength": self.strength.value,
        }


def count_ghosts(board) -> Tuple[int, Counter]:
    """Return (total ghosts, ghosts per department) currently on the board."""
    per_department = Counter()
    for tile in board.iter_tiles():
        if tile.ghost is not None:
            per_department[tile.ghost.department] += 1
    return sum(per_department.values()), per_department


def eligible_tiles(board):
    return [
        tile for tile in board.iter_tiles()
        if not tile.is_mine and tile.ghost is None
        and not tile.is_flagged and not tile.is_revealed
    ]


def spawn_ghost(
    board,
    rng: Optional[random.Random] = None,
    max_total: int = 4,
    max_per_department: int = 2,
):
    """
    Run one spawner tick against the board.

    Picks a hidden, unflagged, non-mine tile without a ghost and gives it a
    department that is still under its cap. Returns the tile that received
    the assignment, or None when the tick was skipped.
    """
    rng = rng or random.Random()

    candidates = eligible_tiles(board)
    total, per_department = count_ghosts(board)

    if total >= max_total or not candidates:
        logger.debug("Ghost tick skipped: total=%d eligible=%d", total, len(candidates))
        return None

    available = [d for d in Department if per_department[d] < max_per_department]
    if not available:
        logger.debug("Ghost tick skipped: every department at cap")
        return None

    tile = rng.choice(candidates)
    department = rng.choice(available)
    strength = rng.choice(list(Strength))
    tile.ghost = GhostAssignment(department, strength)

    logger.debug("Ghost %s (%s) placed at (%d, %d)",
                 department.label, strength.name, tile.row, tile.col)
    return tile
