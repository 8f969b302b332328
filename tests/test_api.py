# tests/test_api.py

import threading
import unittest

from backend.board import Minefield
from backend.scheduler import ManualScheduler
from frontend import api
from frontend.app import app


class TestApi(unittest.TestCase):

    def setUp(self):
        app.config["TESTING"] = True
        app.config["SCHEDULER_FACTORY"] = ManualScheduler
        app.config["GAME_CONFIG_SECTION"] = "default"
        self.client = app.test_client()
        response = self.client.post("/api/new_game", json={"seed": 7})
        self.assertEqual(response.status_code, 200)

    def tearDown(self):
        if api.game is not None:
            api.game.close()

    def test_new_game_state(self):
        data = self.client.get("/api/state").get_json()
        self.assertEqual(data["dimensions"], [10, 10])
        self.assertEqual(data["num_mines"], 6)
        self.assertFalse(data["completed"])
        self.assertEqual(data["log"], [])
        self.assertEqual(len(data["board"]), 10)

    def test_new_game_without_seed_reinitialises(self):
        epoch = api.game.epoch
        data = self.client.post("/api/new_game", json={}).get_json()
        self.assertEqual(data["epoch"], epoch + 1)

    def test_invalid_step(self):
        response = self.client.post("/api/step", json={"action": "chord", "row": 0, "col": 0})
        self.assertEqual(response.status_code, 400)
        response = self.client.post("/api/step", json={"action": "reveal", "row": 0})
        self.assertEqual(response.status_code, 400)
        response = self.client.post("/api/step", json={"action": "reveal", "row": "x", "col": 0})
        self.assertEqual(response.status_code, 400)

    def test_out_of_bounds(self):
        response = self.client.post("/api/step", json={"action": "flag", "row": 10, "col": 0})
        self.assertEqual(response.status_code, 400)
        self.assertIn("outside", response.get_json()["error"])

    def test_flag_step(self):
        data = self.client.post("/api/step", json={"action": "flag", "row": 0, "col": 0}).get_json()
        self.assertEqual([e["key"] for e in data["events"]], ["flag"])
        self.assertTrue(data["board"][0][0]["is_flagged"])
        self.assertEqual(data["encoded_board"][0][0], -2)

        log = self.client.get("/api/log").get_json()
        self.assertEqual([entry["key"] for entry in log], ["flag"])

    def test_acknowledge(self):
        response = self.client.post("/api/acknowledge")
        self.assertEqual(response.status_code, 409)

        api.game.board = Minefield.from_layout(["*..", "...", "..."])
        data = self.client.post("/api/step", json={"action": "reveal", "row": 2, "col": 2}).get_json()
        self.assertTrue(data["completed"])

        data = self.client.post("/api/acknowledge").get_json()
        self.assertTrue(data["summary"]["is_unseen_summary"])
        self.assertEqual(data["log"][-1]["key"], "unseen-summary")

    def test_seeded_new_game_closes_previous_session(self):
        old = api.game
        self.client.post("/api/step", json={"action": "flag", "row": 0, "col": 0})
        self.assertTrue(old.spawner_running)
        self.assertTrue(old.clock_running)

        self.client.post("/api/new_game", json={"seed": 8})
        self.assertIsNot(api.game, old)
        self.assertFalse(old.spawner_running)
        self.assertFalse(old.clock_running)

    def test_concurrent_new_sessions(self):
        barrier = threading.Barrier(8)
        created = []

        def worker(seed):
            with app.test_request_context():
                barrier.wait()
                created.append(api._new_session(seed))

        threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(5.0)

        self.assertEqual(len(created), 8)
        self.assertEqual(len(set(map(id, created))), 8)
        self.assertIn(api.game, created)


if __name__ == "__main__":
    unittest.main()
