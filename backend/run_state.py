# backend/run_state.py

from enum import Enum
from typing import List, Optional


class Achievement(Enum):
    NUM_1 = "NUM_1"
    NUM_2 = "NUM_2"
    NUM_3 = "NUM_3"
    NUM_4 = "NUM_4"
    MINE_TRIGGERED = "MINE_TRIGGERED"
    FLAG_PLACED = "FLAG_PLACED"
    GHOST_FLAG_CLICKED = "GHOST_FLAG_CLICKED"


_KEY_TO_ACHIEVEMENT = {
    "num-1": Achievement.NUM_1,
    "num-2": Achievement.NUM_2,
    "num-3": Achievement.NUM_3,
    "mine": Achievement.MINE_TRIGGERED,
    "flag": Achievement.FLAG_PLACED,
    "ghost": Achievement.GHOST_FLAG_CLICKED,
}


def achievement_for_key(key: str) -> Optional[Achievement]:
    """
    Map an event dedup key to the achievement it unlocks. Every count of
    four or more shares NUM_4; blank tiles unlock nothing.
    """
    if key in _KEY_TO_ACHIEVEMENT:
        return _KEY_TO_ACHIEVEMENT[key]
    if key.startswith("num-"):
        return Achievement.NUM_4
    return None


class RunState:
    """One-shot flags recording which kinds of event the player has seen."""

    def __init__(self):
        self.flags = {achievement: False for achievement in Achievement}

    def mark(self, achievement: Achievement) -> bool:
        """Set the flag. Returns True only the first time."""
        if self.flags[achievement]:
            return False
        self.flags[achievement] = True
        return True

    def is_set(self, achievement: Achievement) -> bool:
        return self.flags[achievement]

    def unseen(self) -> List[Achievement]:
        return [a for a in Achievement if not self.flags[a]]

    def to_dict(self) -> dict:
        return {a.value: seen for a, seen in self.flags.items()}
