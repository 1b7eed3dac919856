"""Notification sink: many producers, one consumer.

Discovery workers `publish()` descriptions onto a shared queue; a single
consumer thread writes them out in the order they were enqueued. The queue is
unbounded by default so a slow destination delays notifications but never
loses them. With a positive `maxsize`, `publish()` blocks until there is room
or the sink is stopped.
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Dict, Optional

from arplogger.discovery.helpers import format_discovery
from arplogger.utils.errors import SinkClosedError

logger = logging.getLogger(__name__)

discovery_logger = logging.getLogger("arplogger.discoveries")


def log_writer(item: Dict[str, Any]) -> None:
    discovery_logger.info(format_discovery(item))


class NotificationSink:
    def __init__(self, writer: Optional[Callable[[Dict[str, Any]], None]] = None,
                 maxsize: int = 0, poll_interval: float = 0.5) -> None:
        self.writer = writer or log_writer
        self.maxsize = maxsize
        self.poll_interval = poll_interval
        self._queue: "queue.Queue[Dict[str, Any]]" = queue.Queue(maxsize=maxsize)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.delivered = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._worker, name="notification-sink", daemon=True)
        self._thread.start()

    def publish(self, item: Dict[str, Any]) -> None:
        """Enqueue `item` for delivery.

        Raises:
            SinkClosedError: if the sink is stopping and cannot take the item
        """
        while True:
            if self._stop_event.is_set():
                raise SinkClosedError("notification sink is shutting down")
            try:
                self._queue.put(item, timeout=self.poll_interval if self.maxsize else None)
                return
            except queue.Full:
                logger.debug("Notification queue full (%d); waiting", self.maxsize)

    def _deliver(self, item: Dict[str, Any]) -> None:
        try:
            self.writer(item)
            self.delivered += 1
        except Exception:
            self.failed += 1
            logger.exception("Failed to write notification: %s", item)
        finally:
            self._queue.task_done()

    def _worker(self) -> None:
        while not self._stop_event.is_set():
            try:
                item = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            self._deliver(item)
        # drain what producers managed to enqueue before the stop
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            self._deliver(item)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop accepting items, let the consumer drain the queue, and wait for it.

        Producers must be stopped first; anything published afterwards is
        rejected with SinkClosedError.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Notification sink did not stop; %d item(s) pending", self.pending)
