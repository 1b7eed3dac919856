"""Append-only store of known hosts.

The backing file holds one record per line, `<mac> <ipv4>`, in discovery
order. Lookups take the lock shared, appends and truncation take it
exclusively. `exists()` followed by `add()` is not atomic: two workers that
see the same new host at once may both append it, which leaves a duplicate
line but never a torn one.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from arplogger.utils.errors import StoreIOError
from arplogger.utils.normalization import normalize_ip, normalize_mac
from arplogger.utils.rwlock import RWLock

logger = logging.getLogger(__name__)


class KnownHostStore:
    """Durable record of (hardware address, protocol address) pairs."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._lock = RWLock()
        self.path: Optional[str] = None
        if path is not None:
            self.init(path)

    def init(self, path: str) -> None:
        """Open or create the store file at `path`.

        Raises:
            StoreIOError: if the file cannot be created or opened for append
        """
        with self._lock.write_locked():
            try:
                with open(path, 'a', encoding='utf-8'):
                    pass
            except OSError as e:
                raise StoreIOError(e.errno, 'cannot open store %s: %s' % (path, e.strerror or e), path) from e
            self.path = path
        logger.debug("Store initialised at %s", path)

    def _require_path(self) -> str:
        if self.path is None:
            raise StoreIOError('store used before init()')
        return self.path

    def exists(self, mac: str) -> bool:
        """Return True if `mac` (any accepted spelling) is already recorded.

        Raises:
            ValidationError: if `mac` is not a valid hardware address
            StoreIOError: if the store cannot be read
        """
        canonical = normalize_mac(mac)
        path = self._require_path()
        with self._lock.read_locked():
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    for line in f:
                        if line.split(' ', 1)[0].rstrip('\n') == canonical:
                            return True
            except FileNotFoundError:
                return False
            except OSError as e:
                raise StoreIOError(e.errno, 'cannot read store %s: %s' % (path, e.strerror or e), path) from e
        return False

    def add(self, mac: str, ip: str) -> None:
        """Append a record for `mac` / `ip`.

        Duplicates are not checked here; call `exists()` first.

        Raises:
            ValidationError: if either address is malformed; nothing is written
            StoreIOError: if the store cannot be appended to
        """
        record = '%s %s\n' % (normalize_mac(mac), normalize_ip(ip))
        path = self._require_path()
        with self._lock.write_locked():
            try:
                with open(path, 'a', encoding='utf-8') as f:
                    f.write(record)
            except OSError as e:
                raise StoreIOError(e.errno, 'cannot append to store %s: %s' % (path, e.strerror or e), path) from e

    def clear(self) -> None:
        """Truncate the store to zero records.

        Raises:
            StoreIOError: if the file cannot be truncated
        """
        path = self._require_path()
        with self._lock.write_locked():
            try:
                with open(path, 'w', encoding='utf-8'):
                    pass
            except OSError as e:
                raise StoreIOError(e.errno, 'cannot truncate store %s: %s' % (path, e.strerror or e), path) from e
        logger.info("Store %s cleared", path)

    def entries(self) -> List[Tuple[str, str]]:
        """Return every record as a (mac, ip) tuple, in file order."""
        path = self._require_path()
        records = []
        with self._lock.read_locked():
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    for line in f:
                        parts = line.split()
                        if len(parts) == 2:
                            records.append((parts[0], parts[1]))
            except FileNotFoundError:
                return []
            except OSError as e:
                raise StoreIOError(e.errno, 'cannot read store %s: %s' % (path, e.strerror or e), path) from e
        return records

    def __len__(self) -> int:
        return len(self.entries())
