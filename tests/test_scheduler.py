# tests/test_scheduler.py

import threading
import time
import unittest
from unittest import mock

from backend.exceptions import StaleEpoch
from backend.scheduler import ManualScheduler, PeriodicTask, ThreadingScheduler


class TestManualScheduler(unittest.TestCase):

    def test_fires_on_period(self):
        scheduler = ManualScheduler()
        ticks = []
        scheduler.schedule_periodic(1.0, lambda: ticks.append("clock"), name="clock")
        scheduler.schedule_periodic(4.0, lambda: ticks.append("ghost"), name="ghost")

        scheduler.advance(0.5)
        self.assertEqual(ticks, [])
        scheduler.advance(3.5)
        self.assertEqual(ticks.count("clock"), 4)
        self.assertEqual(ticks.count("ghost"), 1)
        scheduler.advance(4)
        self.assertEqual(ticks.count("clock"), 8)
        self.assertEqual(ticks.count("ghost"), 2)

    def test_cancel_stops_task(self):
        scheduler = ManualScheduler()
        ticks = []
        task = scheduler.schedule_periodic(1.0, lambda: ticks.append(1))
        scheduler.advance(2)
        task.cancel()
        scheduler.advance(10)
        self.assertEqual(len(ticks), 2)
        self.assertEqual(scheduler.active_tasks(), [])

    def test_stale_epoch_cancels_task(self):
        def callback():
            raise StaleEpoch(1, 2)

        scheduler = ManualScheduler()
        task = scheduler.schedule_periodic(1.0, callback, name="stale")
        scheduler.advance(5)
        self.assertTrue(task.cancelled)
        self.assertEqual(task.runs, 0)

    def test_other_errors_propagate(self):
        def callback():
            raise RuntimeError("boom")

        task = PeriodicTask(1.0, callback)
        with self.assertRaises(RuntimeError):
            task.fire()


class TestThreadingScheduler(unittest.TestCase):

    def test_failing_callback_stops_task(self):
        called = threading.Event()

        def callback():
            called.set()
            raise RuntimeError("boom")

        with mock.patch("threading.excepthook"):
            task = ThreadingScheduler().schedule_periodic(0.01, callback, name="failing")
            try:
                self.assertTrue(called.wait(2.0))
                deadline = time.monotonic() + 2.0
                while task.active and time.monotonic() < deadline:
                    time.sleep(0.01)
                self.assertFalse(task.active)
            finally:
                task.cancel()
        self.assertEqual(task.runs, 0)

    def test_rearms_until_cancelled(self):
        fired = threading.Event()
        count = []

        def callback():
            count.append(1)
            if len(count) >= 3:
                fired.set()

        task = ThreadingScheduler().schedule_periodic(0.01, callback, name="fast")
        try:
            self.assertTrue(fired.wait(2.0))
        finally:
            task.cancel()
        self.assertFalse(task.active)
        self.assertGreaterEqual(task.runs, 2)


if __name__ == "__main__":
    unittest.main()
