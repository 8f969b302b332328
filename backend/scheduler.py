# backend/scheduler.py

"""
Cancellable periodic tasks for the session clock and the ghost spawner.

ThreadingScheduler re-arms a daemon threading.Timer after every run.
ManualScheduler keeps virtual time and only fires on advance(), so tests
and scripted play are deterministic.
"""

import logging
import threading
from typing import Callable, List, Optional

from .exceptions import StaleEpoch

logger = logging.getLogger(__name__)


class PeriodicTask:
    def __init__(self, interval: float, callback: Callable[[], object], name: str = "task"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self.cancelled = False
        self.runs = 0

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self):
        self.cancelled = True

    def fire(self) -> bool:
        """
        Run the callback once. A StaleEpoch from the callback cancels the
        task for good. Returns True if the task should keep running.
        """
        if self.cancelled:
            return False
        try:
            self.callback()
        except StaleEpoch as exc:
            logger.info("Dropping %s tick: %s", self.name, exc)
            self.cancel()
            return False
        self.runs += 1
        return not self.cancelled


class _TimerTask(PeriodicTask):
    def __init__(self, interval, callback, name="task"):
        super().__init__(interval, callback, name)
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def start(self):
        self._arm()

    def _arm(self):
        with self._lock:
            if self.cancelled:
                return
            self._timer = threading.Timer(self.interval, self._run)
            self._timer.daemon = True
            self._timer.start()

    def _run(self):
        try:
            keep_going = self.fire()
        except Exception:
            logger.exception("%s tick failed, stopping task", self.name)
            self.cancel()
            raise
        if keep_going:
            self._arm()

    def cancel(self):
        with self._lock:
            super().cancel()
            if self._timer:
                self._timer.cancel()
                self._timer = None


class ThreadingScheduler:
    def schedule_periodic(self, interval: float, callback, name: str = "task") -> PeriodicTask:
        task = _TimerTask(interval, callback, name)
        task.start()
        return task


class ManualScheduler:
    """Virtual clock. Nothing runs until advance() moves time forward."""

    def __init__(self):
        self.now = 0.0
        self.tasks: List[PeriodicTask] = []

    def schedule_periodic(self, interval: float, callback, name: str = "task") -> PeriodicTask:
        task = PeriodicTask(interval, callback, name)
        task.next_due = self.now + interval
        self.tasks.append(task)
        return task

    def advance(self, seconds: float):
        target = self.now + seconds
        while True:
            self.tasks = [t for t in self.tasks if t.active]
            due = [t for t in self.tasks if t.next_due <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.next_due)
            self.now = task.next_due
            task.next_due += task.interval
            task.fire()
        self.now = target

    def active_tasks(self) -> List[str]:
        return [t.name for t in self.tasks if t.active]
