# backend/board.py

import random
from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .ghosts import GhostAssignment
from .utils import get_neighbors

# Encoded board values (see Minefield.get_encoded_board)
HIDDEN = -3
FLAGGED = -2
MINE = -1


@dataclass
class Tile:
    row: int
    col: int
    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    neighbor_mines: int = 0
    ghost: Optional[GhostAssignment] = None


class Minefield:
    """
    A fixed rows x cols grid of tiles.

    Mines are placed once, by generate_minefield(); neighbor counts are
    computed right after and never change. The grid itself is mutated in
    place by reveal, flag and the ghost spawner.
    """

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.tiles = [[Tile(r, c) for c in range(cols)] for r in range(rows)]

    @classmethod
    def from_layout(cls, layout: List[str]) -> "Minefield":
        """
        Build a board from rows of text, '*' marking a mine and anything else
        a safe tile. Handy for setting up exact positions.
        """
        board = cls(len(layout), len(layout[0]))
        for r, line in enumerate(layout):
            for c, ch in enumerate(line):
                board.tiles[r][c].is_mine = ch == "*"
        board.compute_neighbor_counts()
        return board

    @property
    def num_mines(self) -> int:
        return sum(1 for tile in self.iter_tiles() if tile.is_mine)

    def iter_tiles(self):
        for row in self.tiles:
            yield from row

    def is_valid_coord(self, row, col) -> bool:
        if isinstance(row, bool) or isinstance(col, bool):
            return False
        if not isinstance(row, int) or not isinstance(col, int):
            return False
        return 0 <= row < self.rows and 0 <= col < self.cols

    def tile(self, row: int, col: int) -> Tile:
        return self.tiles[row][col]

    def neighbors(self, row: int, col: int) -> List[Tile]:
        return [self.tiles[nr][nc] for nr, nc in get_neighbors(row, col, self.rows, self.cols)]

    def compute_neighbor_counts(self):
        for tile in self.iter_tiles():
            if tile.is_mine:
                tile.neighbor_mines = 0
                continue
            tile.neighbor_mines = sum(1 for n in self.neighbors(tile.row, tile.col) if n.is_mine)

    def flood_reveal(self, row: int, col: int) -> List[Tuple[int, int]]:
        """
        Breadth-first expansion from a zero tile at (row, col).

        Every hidden, unflagged, non-mine neighbor gets revealed; only the
        ones that are themselves zero are expanded further. is_revealed is
        the visited marker, so each tile is queued at most once.
        Returns the coordinates revealed by the expansion (seed excluded).
        """
        opened = []
        queue = deque([(row, col)])
        while queue:
            r, c = queue.popleft()
            for neighbor in self.neighbors(r, c):
                if neighbor.is_revealed or neighbor.is_mine or neighbor.is_flagged:
                    continue
                neighbor.is_revealed = True
                opened.append((neighbor.row, neighbor.col))
                if neighbor.neighbor_mines == 0:
                    queue.append((neighbor.row, neighbor.col))
        return opened

    def is_complete(self) -> bool:
        for tile in self.iter_tiles():
            if not tile.is_mine and not tile.is_revealed:
                return False
        return True

    def get_visible_state(self) -> List[List[dict]]:
        """
        Read-only snapshot for the presentation layer. Mine identity and the
        neighbor count are only exposed once the tile is revealed.
        """
        state = []
        for row in self.tiles:
            row_cells = []
            for tile in row:
                row_cells.append({
                    "row": tile.row,
                    "col": tile.col,
                    "is_revealed": tile.is_revealed,
                    "is_flagged": tile.is_flagged,
                    "is_mine": tile.is_mine if tile.is_revealed else None,
                    "neighbor_mines": (
                        tile.neighbor_mines if tile.is_revealed and not tile.is_mine else None
                    ),
                    "ghost": tile.ghost.to_dict() if tile.ghost else None,
                })
            state.append(row_cells)
        return state

    def get_encoded_board(self) -> np.ndarray:
        """
        Encode the visible board as an int8 matrix:
            -3 hidden, -2 flagged, -1 revealed mine, 0-8 revealed count
        """
        encoded = np.full((self.rows, self.cols), HIDDEN, dtype=np.int8)
        for tile in self.iter_tiles():
            if tile.is_flagged:
                encoded[tile.row, tile.col] = FLAGGED
            elif tile.is_revealed:
                encoded[tile.row, tile.col] = MINE if tile.is_mine else tile.neighbor_mines
        return encoded

    def print_debug_board(self):
        for row in self.tiles:
            line = ""
            for tile in row:
                if tile.is_mine:
                    line += " * "
                elif tile.ghost is not None:
                    line += f" {tile.ghost.department.label[0]} "
                else:
                    line += f" {tile.neighbor_mines} "
            print(line)


def generate_minefield(rows: int, cols: int, num_mines: int,
                       rng: Optional[random.Random] = None) -> Minefield:
    """
    Place num_mines mines by drawing uniform random coordinates and skipping
    draws that land on a tile already mined, then compute neighbor counts.
    Deterministic for a seeded rng.
    """
    if num_mines >= rows * cols:
        raise ValueError(
            f"Cannot place {num_mines} mines on a {rows}x{cols} board."
        )
    rng = rng or random.Random()

    board = Minefield(rows, cols)
    placed = 0
    while placed < num_mines:
        r = rng.randrange(rows)
        c = rng.randrange(cols)
        if not board.tiles[r][c].is_mine:
            board.tiles[r][c].is_mine = True
            placed += 1

    board.compute_neighbor_counts()
    return board
