"""Discovery service: runs one worker per capture handle plus the sink.

All workers share a single stop event. `stop()` sets it, waits for the
workers, closes every handle and only then stops the sink, so descriptions
published during shutdown are still written.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import List, Optional, Tuple

from arplogger.discovery.worker import DiscoveryWorker

logger = logging.getLogger(__name__)


class DiscoveryService:
    def __init__(self, store, sink, handles: List[Tuple[str, object]],
                 poll_interval: float = 0.5) -> None:
        self.store = store
        self.sink = sink
        self.handles = list(handles)
        self.poll_interval = poll_interval
        self.stop_event = threading.Event()
        self.workers: List[DiscoveryWorker] = []
        self._stopped = False

    def start(self) -> None:
        self.sink.start()
        for name, handle in self.handles:
            worker = DiscoveryWorker(name, handle, self.store, self.sink, self.stop_event,
                                     poll_interval=self.poll_interval)
            worker.start()
            self.workers.append(worker)

    def running(self) -> bool:
        return any(w.is_alive() for w in self.workers)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stop is requested or every worker has terminated.

        Returns True if the service finished, False if `timeout` expired.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self.stop_event.is_set() and self.running():
            wait = self.poll_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                wait = min(wait, remaining)
            self.stop_event.wait(wait)
        if not self.stop_event.is_set():
            logger.error("All reader threads have terminated")
        return True

    def request_stop(self) -> None:
        """Ask all workers to stop; safe to call from a signal handler."""
        self.stop_event.set()

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self.stop_event.set()
        for worker in self.workers:
            worker.join(self.poll_interval * 4)
            if worker.is_alive():
                logger.warning("Reader thread for %s did not stop in time", worker.interface)
        for name, handle in self.handles:
            try:
                handle.close()
            except Exception:
                logger.exception("Error closing capture handle on %s", name)
        self.sink.stop()
        for worker in self.workers:
            logger.info("Worker summary: %s", worker.snapshot())
        logger.info("Notifications delivered: %d, failed: %d", self.sink.delivered, self.sink.failed)

    def __enter__(self):
        try:
            self.start()
        except Exception:
            self.stop()
            raise
        return self

    def __exit__(self, *exc_info):
        self.stop()
