# backend/events.py

"""
Events emitted by the game core and the deduplicated network log.

An Event is what the presentation layer shows as a popup every time it
happens. The log keeps one condensed LogEntry per dedup key, first
occurrence wins.
"""

import random
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from .ghosts import Department
from .run_state import RunState
from .utils import current_timestamp

RATING_GRADES = ("A", "B", "C")

SUMMARY_KEY = "unseen-summary"
SUMMARY_TITLE = "--- UNSEEN TYPES (REPLAY TO DISCOVER) ---"
ALL_DISCOVERED = "> ALL TYPES DISCOVERED ✓"

GHOST_BODIES = {
    Department.PUBLICATION: "From: Publication\nPaper alignment partially shared.\nReuse discussion recorded.",
    Department.PRINTMAKING: "From: Printmaking\nSpecification mismatch detected.\nTransfer attempt failed.",
}

# Fixed condensed log lines, keyed by dedup key
_LOG_LINES = {
    "mine": ("[CARBON EVENT]", "Post-use blackout."),
    "flag": ("[OFFSET]", "Carbon impact compensated."),
    "blank": ("[MISSING]", "No incident logged."),
}


@dataclass
class Event:
    key: str
    title: str
    body: str
    footer: Optional[str] = None
    color: Optional[str] = None
    stamp: Optional[str] = None
    department: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LogEntry:
    key: str
    timestamp: str
    title: str
    body: str
    is_unseen_summary: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def number_event(count: int, rng: Optional[random.Random] = None) -> Event:
    rng = rng or random.Random()
    title = f"VISIBILITY: {count}"

    if count == 1:
        grade = rng.choice(RATING_GRADES)
        body = f"Selection data available.\nEnvironmental Rating: {grade}\nStudents rarely pay attention."
        return Event(f"num-{count}", title, body, stamp=grade)
    if count == 2:
        grade = rng.choice(RATING_GRADES)
        body = f"Supplier credentials recorded.\nEnvironmental Rating: {grade}\nReuse exists but not centralised."
        return Event(f"num-{count}", title, body, stamp=grade)
    if count == 3:
        body = "Cross-workshop link partial.\nPublication exchange: occasional, informal."
        return Event(f"num-{count}", title, body)

    body = "Downstream unknown.\nDisposal handled externally. No trace."
    return Event(f"num-{count}", title, body)


def blank_event() -> Event:
    return Event(
        "blank",
        "MISSING RECORD",
        "No incident logged here.\nAbsence does not equal sustainability.",
    )


def mine_event() -> Event:
    return Event(
        "mine",
        "POST-USE BLACKOUT",
        "A-rated at selection.\nUntraceable after use.\nRecycling route not recorded.",
        footer="Visibility collapses downstream.",
        color="#dc2626",
    )


def ghost_event(department: Department) -> Event:
    return Event(
        "ghost",
        "INTERFERENCE SIGNAL",
        GHOST_BODIES[department],
        color=department.color,
        department=department.label,
    )


def flag_event() -> Event:
    return Event(
        "flag",
        "OFFSET DECLARED",
        "Carbon impact compensated via external programme.\nVerification unavailable.",
    )


def condense(event: Event, timestamp: str) -> LogEntry:
    """Turn a popup event into its one-line terminal log entry."""
    first_line = event.body.split("\n")[0]
    if event.key in _LOG_LINES:
        title, body = _LOG_LINES[event.key]
    elif event.key.startswith("num-"):
        title, body = f"[VISIBILITY {event.key.split('-')[1]}]", first_line
    elif event.key == "ghost":
        title, body = "[INTERFERENCE]", first_line
    else:
        title, body = event.title, first_line
    return LogEntry(event.key, timestamp, title, body)


class EventLog:
    """Append-only log holding at most one entry per dedup key."""

    def __init__(self):
        self.entries: List[LogEntry] = []
        self._keys = set()

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __contains__(self, key):
        return key in self._keys

    def append(self, event: Event, timestamp: Optional[str] = None) -> Optional[LogEntry]:
        """
        Record the event unless its key is already in the log.
        Returns the new entry, or None when it was a duplicate.
        """
        if event.key in self._keys:
            return None
        entry = condense(event, timestamp or current_timestamp())
        self.entries.append(entry)
        self._keys.add(event.key)
        return entry

    def append_summary(self, entry: LogEntry) -> LogEntry:
        # terminal marker, not a category: bypasses dedup
        self.entries.append(entry)
        return entry

    def keys(self) -> List[str]:
        return [entry.key for entry in self.entries]

    def to_list(self) -> List[Dict]:
        return [entry.to_dict() for entry in self.entries]


def summarize_unseen(run_state: RunState, timestamp: Optional[str] = None) -> LogEntry:
    unseen = run_state.unseen()
    if unseen:
        body = "\n".join(f"> {achievement.value} [UNSEEN]" for achievement in unseen)
    else:
        body = ALL_DISCOVERED
    return LogEntry(
        SUMMARY_KEY,
        timestamp or current_timestamp(),
        SUMMARY_TITLE,
        body,
        is_unseen_summary=True,
    )
