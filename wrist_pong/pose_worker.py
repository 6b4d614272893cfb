"""Background thread that keeps the latest pose estimate ready for the game.

Pose inference can take longer than a physics tick. Running it inside the
pose sampler would stall the cooperative scheduler, and the ball with it.
:class:`BackgroundPoseWorker` runs the slow estimator in a loop on its own
thread and publishes each result under a lock, so :meth:`latest` is only a
snapshot read.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from wrist_pong.control_types import Keypoint


logger = logging.getLogger(__name__)


class BackgroundPoseWorker:
    """Calls ``estimator`` repeatedly on a daemon thread and caches its result."""

    def __init__(self, estimator: Callable[[], Optional[Keypoint]], idle_seconds: float = 0.005) -> None:
        self.estimator = estimator
        self.idle_seconds = idle_seconds
        # Shared state protected by a lock so the game loop can poll without blocking.
        self._state_lock = threading.Lock()
        self._latest: Optional[Keypoint] = None
        self._version = 0
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True)

    def start(self) -> "BackgroundPoseWorker":
        self._thread.start()
        return self

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                keypoint = self.estimator()
            except Exception:
                # A failed estimate counts as "nobody detected" for this round.
                logger.warning("Pose estimation failed on worker thread", exc_info=True)
                keypoint = None
            with self._state_lock:
                self._latest = keypoint
                self._version += 1
            # Yield so a fast estimator does not starve the game thread.
            self._stop_event.wait(self.idle_seconds)

    def latest(self) -> Optional[Keypoint]:
        with self._state_lock:
            return self._latest

    @property
    def version(self) -> int:
        """Number of estimates published so far."""

        with self._state_lock:
            return self._version

    def wait_for_version(self, version: int, timeout: float) -> bool:
        """Block until at least ``version`` estimates have been published."""

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if self.version >= version:
                return True
            time.sleep(0.005)
        return self.version >= version

    def stop(self, timeout: float = 1.5) -> None:
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout=timeout)
