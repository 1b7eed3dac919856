from arplogger.storage.db import KnownHostStore

__all__ = ["KnownHostStore"]
