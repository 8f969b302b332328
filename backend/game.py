# backend/game.py

import logging
import random
import threading
from functools import partial
from typing import List, Optional

from .board import Minefield, generate_minefield
from .config import GameConfig, load_config
from .events import (
    Event,
    EventLog,
    LogEntry,
    blank_event,
    flag_event,
    ghost_event,
    mine_event,
    number_event,
    summarize_unseen,
)
from .exceptions import InvalidCoordinate, StaleEpoch
from .ghosts import spawn_ghost
from .run_state import RunState, achievement_for_key
from .scheduler import PeriodicTask, ThreadingScheduler
from .utils import format_time

logger = logging.getLogger(__name__)


class GameSession:
    """
    Owns one board, its event log and run state, the session clock and the
    ghost spawner.

    Every mutation (player actions and timer ticks alike) runs under a single
    lock. Timer callbacks carry the epoch they were scheduled under and are
    rejected with StaleEpoch once reinit() has moved the epoch on.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None, scheduler=None):
        self.config = config or load_config()
        self.rows = self.config.rows
        self.cols = self.config.cols
        self.num_mines = self.config.num_mines
        self.seed = seed
        self.rng = random.Random(seed)
        self.scheduler = scheduler or ThreadingScheduler()

        self.lock = threading.RLock()
        self.epoch = 0
        self._clock_task: Optional[PeriodicTask] = None
        self._ghost_task: Optional[PeriodicTask] = None

        self.reinit()

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def reinit(self) -> dict:
        """
        Throw away the current session and start a fresh one. Any timer
        scheduled before this call is cancelled and its epoch invalidated.
        """
        with self.lock:
            self._cancel_timers()
            self.epoch += 1

            self.board: Minefield = generate_minefield(self.rows, self.cols, self.num_mines, self.rng)
            self.event_log = EventLog()
            self.run_state = RunState()
            self.completed = False
            self.summary: Optional[LogEntry] = None
            self.elapsed = 0
            self.moves_made = 0
            self.has_placed_flag = False

            logger.info("Session reinitialised (epoch %d, %dx%d, %d mines)",
                        self.epoch, self.rows, self.cols, self.num_mines)
            return self.get_state()

    def close(self):
        with self.lock:
            self._cancel_timers()

    def _cancel_timers(self):
        if self._clock_task is not None:
            self._clock_task.cancel()
            self._clock_task = None
        if self._ghost_task is not None:
            self._ghost_task.cancel()
            self._ghost_task = None

    @property
    def clock_running(self) -> bool:
        return self._clock_task is not None and self._clock_task.active

    @property
    def spawner_running(self) -> bool:
        return self._ghost_task is not None and self._ghost_task.active

    def _start_clock(self):
        if self.completed or self.clock_running:
            return
        self._clock_task = self.scheduler.schedule_periodic(
            self.config.clock_interval, partial(self.clock_tick, self.epoch), name="clock"
        )

    def _start_spawner(self):
        if self.completed or self.spawner_running:
            return
        self._ghost_task = self.scheduler.schedule_periodic(
            self.config.ghost_interval, partial(self.spawner_tick, self.epoch), name="ghost-spawner"
        )

    def _check_epoch(self, epoch: int):
        if epoch != self.epoch:
            raise StaleEpoch(epoch, self.epoch)

    # ------------------------------------------------------------------
    # timer callbacks
    # ------------------------------------------------------------------
    def clock_tick(self, epoch: int):
        with self.lock:
            self._check_epoch(epoch)
            if self.completed:
                return
            self.elapsed += 1

    def spawner_tick(self, epoch: int):
        with self.lock:
            self._check_epoch(epoch)
            if self.completed:
                return None
            return spawn_ghost(
                self.board,
                self.rng,
                max_total=self.config.max_ghosts,
                max_per_department=self.config.max_ghosts_per_department,
            )

    # ------------------------------------------------------------------
    # player actions
    # ------------------------------------------------------------------
    def _validate(self, row, col):
        if not self.board.is_valid_coord(row, col):
            raise InvalidCoordinate(row, col, self.rows, self.cols)

    def _emit(self, events: List[Event], event: Event):
        events.append(event)
        achievement = achievement_for_key(event.key)
        if achievement is not None:
            self.run_state.mark(achievement)
        self.event_log.append(event)

    def _emit_cascade_numbers(self, events: List[Event], opened):
        # one event per distinct count exposed by the cascade
        seen = set()
        for r, c in opened:
            tile = self.board.tile(r, c)
            if tile.neighbor_mines == 0 or tile.ghost is not None or tile.neighbor_mines in seen:
                continue
            seen.add(tile.neighbor_mines)
            self._emit(events, number_event(tile.neighbor_mines, self.rng))

    def reveal(self, row: int, col: int) -> List[Event]:
        """
        Reveal the tile at (row, col) and return the events it produced.

        Flagged tiles are left alone. A ghost on the tile reports on every
        click, and suppresses the blank/number event of the tile underneath.
        """
        with self.lock:
            self._validate(row, col)
            tile = self.board.tile(row, col)
            events: List[Event] = []

            if tile.is_flagged:
                return events

            self._start_clock()
            self.moves_made += 1

            if tile.ghost is not None:
                self._emit(events, ghost_event(tile.ghost.department))

            if tile.is_revealed:
                return events

            tile.is_revealed = True

            if tile.is_mine:
                self._emit(events, mine_event())
                logger.info("Mine triggered at (%d, %d)", row, col)
                return events

            if tile.neighbor_mines == 0:
                if tile.ghost is None:
                    self._emit(events, blank_event())
                opened = self.board.flood_reveal(row, col)
                self._emit_cascade_numbers(events, opened)
            elif tile.ghost is None:
                self._emit(events, number_event(tile.neighbor_mines, self.rng))

            self.check_completion()
            return events

    def toggle_flag(self, row: int, col: int) -> List[Event]:
        with self.lock:
            self._validate(row, col)
            tile = self.board.tile(row, col)
            events: List[Event] = []

            if tile.is_revealed:
                return events

            self._start_clock()
            self.moves_made += 1

            if tile.is_flagged:
                tile.is_flagged = False
                return events

            tile.is_flagged = True
            self._emit(events, flag_event())
            if not self.has_placed_flag:
                self.has_placed_flag = True
                self._start_spawner()
            return events

    def step(self, action: str, row: int, col: int) -> dict:
        """
        Apply an action ("reveal" or "flag") at (row, col).
        Returns the state after the action plus the events it produced.
        """
        if action == "reveal":
            events = self.reveal(row, col)
        elif action == "flag":
            events = self.toggle_flag(row, col)
        else:
            raise ValueError(f"Unknown action '{action}'")

        state = self.get_state()
        state["events"] = [event.to_dict() for event in events]
        return state

    # ------------------------------------------------------------------
    # completion
    # ------------------------------------------------------------------
    def check_completion(self) -> bool:
        """
        True iff every non-mine tile is revealed. The first True result marks
        the session completed and stops both timers.
        """
        with self.lock:
            done = self.board.is_complete()
            if done and not self.completed:
                self.completed = True
                self._cancel_timers()
                logger.info("Session completed in %s after %d moves",
                            format_time(self.elapsed), self.moves_made)
            return done

    def acknowledge_completion(self) -> Optional[LogEntry]:
        """
        Append the unseen-categories summary to the log. Only valid once the
        session is completed; repeated calls return the same entry.
        """
        with self.lock:
            if not self.completed:
                return None
            if self.summary is None:
                self.summary = self.event_log.append_summary(summarize_unseen(self.run_state))
            return self.summary

    # ------------------------------------------------------------------
    # snapshots
    # ------------------------------------------------------------------
    def get_state(self) -> dict:
        with self.lock:
            return {
                "board": self.board.get_visible_state(),
                "encoded_board": self.board.get_encoded_board().tolist(),
                "dimensions": (self.rows, self.cols),
                "num_mines": self.num_mines,
                "completed": self.completed,
                "elapsed": self.elapsed,
                "time": format_time(self.elapsed),
                "moves_made": self.moves_made,
                "score": self.get_score(),
                "epoch": self.epoch,
                "run_state": self.run_state.to_dict(),
                "log": self.event_log.to_list(),
            }

    def get_score(self) -> float:
        """Fraction of the board revealed so far."""
        revealed = sum(1 for tile in self.board.iter_tiles() if tile.is_revealed)
        return revealed / (self.rows * self.cols)
