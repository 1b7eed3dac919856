"""scapy-backed ARP capture handle.

Each handle owns one layer-2 listen socket bound to a single interface and an
`AsyncSniffer` thread that pushes the sender addresses of every ARP frame onto
a private queue. `receive()` is the only blocking call a discovery worker
makes.
"""
from __future__ import annotations

import logging
import queue
import time
from typing import Optional, Tuple

from scapy.all import ARP, AsyncSniffer, conf
from scapy.data import ETH_P_ARP

from arplogger.utils.errors import CaptureError

logger = logging.getLogger(__name__)

# upper bound on a single wait so a dead sniffer is noticed even without a timeout
_LIVENESS_CHECK = 0.5


class ArpCaptureHandle:
    def __init__(self, interface: str):
        self.interface = interface
        self._frames: "queue.Queue[Tuple[str, str]]" = queue.Queue()
        self._closed = False
        # ARP frames only; raises PermissionError without CAP_NET_RAW, OSError for a bad interface
        self._sock = conf.L2listen(iface=interface, type=ETH_P_ARP)
        try:
            self._sniffer = AsyncSniffer(opened_socket=self._sock, prn=self._process_packet, store=False)
            self._sniffer.start()
        except Exception:
            self._sock.close()
            raise
        logger.debug("Capture handle opened on %s", interface)

    def _process_packet(self, pkt):
        if pkt.haslayer(ARP):
            arp_layer = pkt[ARP]
            self._frames.put((arp_layer.hwsrc, arp_layer.psrc))

    def _failure(self) -> Optional[str]:
        if self._closed:
            return "capture handle on %s closed" % self.interface
        if not self._sniffer.running:
            exc = getattr(self._sniffer, "exception", None)
            if exc is not None:
                return "capture on %s failed: %s" % (self.interface, exc)
            return "capture on %s stopped" % self.interface
        return None

    def receive(self, timeout: Optional[float] = None) -> Optional[Tuple[str, str]]:
        """Return the next (sender MAC, sender IP) pair.

        Returns None if `timeout` seconds pass without a frame.

        Raises:
            CaptureError: once the handle is closed or the sniffer has stopped
                and no buffered frames remain
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._closed or self._frames.empty():
                reason = self._failure()
                if reason:
                    raise CaptureError(reason)
            wait = _LIVENESS_CHECK
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            try:
                return self._frames.get(timeout=wait)
            except queue.Empty:
                if deadline is not None and time.monotonic() >= deadline:
                    return None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._sniffer.running:
                self._sniffer.stop()
        except Exception:
            logger.exception("Error stopping sniffer on %s", self.interface)
        finally:
            self._sock.close()
        logger.debug("Capture handle on %s closed", self.interface)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
