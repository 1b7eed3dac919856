"""Discovery worker: one thread per capture handle.

The worker blocks in `handle.receive()`, looks the sender up in the shared
store, and for an unknown host publishes a description before recording it.
Publishing first means a crash between the two steps re-reports the host on
the next run instead of never reporting it.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict

from arplogger.discovery.helpers import make_discovery
from arplogger.utils.errors import CaptureError, SinkClosedError, StoreIOError, ValidationError
from arplogger.utils.normalization import normalize_ip, normalize_mac

logger = logging.getLogger(__name__)

RUNNING = "running"
TERMINATED = "terminated"


class DiscoveryWorker(threading.Thread):
    def __init__(self, interface: str, handle, store, sink, stop_event: threading.Event,
                 poll_interval: float = 0.5) -> None:
        super().__init__(name="discovery-%s" % interface, daemon=True)
        self.interface = interface
        self.handle = handle
        self.store = store
        self.sink = sink
        self.stop_event = stop_event
        self.poll_interval = poll_interval
        self.state = RUNNING
        self.stats: Dict[str, int] = {
            'events': 0,
            'discoveries': 0,
            'invalid': 0,
            'store_errors': 0,
        }

    def run(self) -> None:
        logger.info("Starting reader thread for %s", self.interface)
        try:
            while not self.stop_event.is_set():
                try:
                    frame = self.handle.receive(timeout=self.poll_interval)
                except CaptureError as e:
                    logger.warning("Reader thread for %s terminated: %s", self.interface, e)
                    break
                if frame is None:
                    continue
                self.stats['events'] += 1
                mac, ip = frame
                try:
                    self.process(mac, ip)
                except SinkClosedError:
                    logger.warning("Notification sink closed; stopping reader for %s", self.interface)
                    break
        except Exception:
            logger.exception("Reader thread for %s crashed", self.interface)
        finally:
            self.state = TERMINATED
            logger.info("Reader thread for %s stopped (%s)", self.interface, self.stats)

    def process(self, mac: str, ip: str) -> bool:
        """Handle one observed (mac, ip) pair; return True if the host was new."""
        try:
            canonical = normalize_mac(mac)
            address = normalize_ip(ip)
            if self.store.exists(canonical):
                return False
        except ValidationError as e:
            self.stats['invalid'] += 1
            logger.debug("Dropping frame on %s: %s", self.interface, e)
            return False
        except StoreIOError as e:
            self.stats['store_errors'] += 1
            logger.error("Store lookup failed on %s for %s: %s", self.interface, canonical, e)
            return False

        self.sink.publish(make_discovery(self.interface, canonical, address))
        self.stats['discoveries'] += 1
        try:
            self.store.add(canonical, address)
        except StoreIOError as e:
            self.stats['store_errors'] += 1
            logger.error("Could not record %s (%s) seen on %s: %s", canonical, address, self.interface, e)
        return True

    def snapshot(self) -> Dict[str, Any]:
        return dict(self.stats, interface=self.interface, state=self.state)
