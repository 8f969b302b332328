# backend/utils.py

from datetime import datetime
from typing import List, Tuple


def get_neighbors(row: int, col: int, rows: int, cols: int) -> List[Tuple[int, int]]:
    """
    Return a list of valid neighboring coordinates (8-way) for (row, col).
    """
    neighbors = []
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            nr, nc = row + dr, col + dc
            if (dr != 0 or dc != 0) and 0 <= nr < rows and 0 <= nc < cols:
                neighbors.append((nr, nc))
    return neighbors


def format_time(seconds: int) -> str:
    """Format elapsed seconds as MM:SS."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def current_timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")
