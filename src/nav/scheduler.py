# src/nav/scheduler.py
"""
Ways to drive search sessions.

- SearchScheduler: host tick loop. Each tick() advances every active
  session by one batch of expansions; finished sessions are dropped.
- ThreadedSearchRunner: runs a single session on a worker thread and
  relies on the session's completion callback for delivery.

Both only ever stop a session between batches, so no partially relaxed
state is visible from outside the engine.
"""

from __future__ import annotations

import logging
import threading
from threading import Lock
from typing import List, Optional

from contracts.types import SearchStatus

from .theta_star import ThetaStarSearch

logger = logging.getLogger(__name__)


class SearchScheduler:
    """Round-robin tick driver for any number of independent sessions."""

    def __init__(self) -> None:
        self._sessions: List[ThetaStarSearch] = []
        self._lock = Lock()
        self.ticks = 0

    @property
    def active(self) -> List[ThetaStarSearch]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def submit(self, session: ThetaStarSearch) -> ThetaStarSearch:
        """
        Track a begun session. Sessions that already finished inside
        begin() (start == goal) are not tracked.
        """
        if session.status is SearchStatus.IDLE:
            raise RuntimeError("begin() the session before submitting it")
        if session.is_running:
            with self._lock:
                if session not in self._sessions:
                    self._sessions.append(session)
        return session

    def cancel(self, session: ThetaStarSearch) -> None:
        session.cancel()
        with self._lock:
            if session in self._sessions:
                self._sessions.remove(session)

    def cancel_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions)
            self._sessions.clear()
        for session in sessions:
            session.cancel()

    def tick(self) -> int:
        """Advance every active session by one batch; return how many remain."""
        self.ticks += 1
        with self._lock:
            sessions = list(self._sessions)

        finished: List[ThetaStarSearch] = []
        for session in sessions:
            if session.step().is_terminal:
                finished.append(session)

        with self._lock:
            for session in finished:
                if session in self._sessions:
                    self._sessions.remove(session)
            return len(self._sessions)

    def run_until_idle(self, max_ticks: Optional[int] = None) -> int:
        """
        Tick until no session is running (or max_ticks is hit).

        Returns the number of ticks performed.
        """
        performed = 0
        while len(self) > 0:
            if max_ticks is not None and performed >= max_ticks:
                break
            self.tick()
            performed += 1
        return performed


class ThreadedSearchRunner:
    """
    Run one session on a background thread.

    The session's own on_complete callback delivers the path; it is invoked
    on the worker thread. `interval` seconds are waited between batches
    (0 runs batches back to back). cancel() stops the worker at the next
    batch boundary.
    """

    def __init__(self, session: ThetaStarSearch, interval: float = 0.0) -> None:
        if session.status is SearchStatus.IDLE:
            raise RuntimeError("begin() the session before running it")
        self.session = session
        self.interval = interval
        self.error: Optional[BaseException] = None
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"theta-star-{session.start}->{session.goal}",
            daemon=True,
        )

    def start(self) -> "ThreadedSearchRunner":
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker; returns True if it has finished."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def done(self) -> bool:
        return self._thread.ident is not None and not self._thread.is_alive()

    def _run(self) -> None:
        try:
            while self.session.is_running:
                if self._stop.is_set():
                    self.session.cancel()
                    break
                self.session.step()
                if self.interval > 0:
                    self._stop.wait(self.interval)
        except Exception as exc:
            # surfaced to the owner through `error`; nothing else joins this thread
            logger.exception("background search %s -> %s failed", self.session.start, self.session.goal)
            self.error = exc
