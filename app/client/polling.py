"""Background feed refresh."""

import logging
import threading
from collections.abc import Callable

import httpx

from app.client.api import ApiError

logger = logging.getLogger("voiceapp.client")

DEFAULT_POLL_INTERVAL = 5.0


class FeedPoller:
    """Calls ``refresh`` every ``interval`` seconds on a daemon thread until stopped."""

    def __init__(self, refresh: Callable[[], None], interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self.refresh = refresh
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="feed-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None

    def poll_once(self) -> bool:
        """Run one refresh. Returns False if it failed."""
        try:
            self.refresh()
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Feed refresh failed: %s", e)
            return False
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once()
