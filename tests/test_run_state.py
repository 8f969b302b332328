# tests/test_run_state.py

import unittest

from backend.run_state import Achievement, RunState, achievement_for_key


class TestRunState(unittest.TestCase):

    def test_starts_unseen(self):
        state = RunState()
        self.assertEqual(len(state.unseen()), 7)
        self.assertFalse(any(state.to_dict().values()))

    def test_mark_is_idempotent(self):
        state = RunState()
        self.assertTrue(state.mark(Achievement.MINE_TRIGGERED))
        self.assertFalse(state.mark(Achievement.MINE_TRIGGERED))
        self.assertTrue(state.is_set(Achievement.MINE_TRIGGERED))
        self.assertNotIn(Achievement.MINE_TRIGGERED, state.unseen())

    def test_key_mapping(self):
        self.assertEqual(achievement_for_key("num-1"), Achievement.NUM_1)
        self.assertEqual(achievement_for_key("num-3"), Achievement.NUM_3)
        self.assertEqual(achievement_for_key("num-4"), Achievement.NUM_4)
        self.assertEqual(achievement_for_key("num-8"), Achievement.NUM_4)
        self.assertEqual(achievement_for_key("ghost"), Achievement.GHOST_FLAG_CLICKED)
        self.assertEqual(achievement_for_key("flag"), Achievement.FLAG_PLACED)
        self.assertIsNone(achievement_for_key("blank"))


if __name__ == "__main__":
    unittest.main()
