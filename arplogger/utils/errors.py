"""Error hierarchy shared by every arplogger component."""
from __future__ import annotations

from typing import Dict


class ArpLoggerError(Exception):
    """Base class for all arplogger errors."""


class ValidationError(ArpLoggerError, ValueError):
    """Malformed hardware or protocol address text."""


class StoreIOError(ArpLoggerError, OSError):
    """The known-host store could not be created, read or truncated."""


class CapabilityError(ArpLoggerError, PermissionError):
    """Insufficient privilege to open a capture handle."""


class InterfaceError(ArpLoggerError):
    """The named network interface does not exist or cannot be used."""


class CaptureError(ArpLoggerError):
    """A capture handle failed or was closed."""


class SinkClosedError(ArpLoggerError):
    """The notification sink is shutting down and no longer accepts items."""


class OpenHandlesError(ArpLoggerError):
    """One or more interfaces could not be opened.

    `failures` maps each failed interface name to the error that caused it.
    """

    def __init__(self, failures: Dict[str, Exception]):
        self.failures = dict(failures)
        super().__init__("Unable to use interface(s): %s" % ", ".join(self.failures))
