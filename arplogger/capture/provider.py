"""Capture handle provider.

Opens one `ArpCaptureHandle` per requested interface. Interfaces that cannot
be opened are collected into a single `OpenHandlesError` instead of stopping
at the first failure, so the caller can carry on with whatever did open.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Dict, List, Optional, Tuple

from scapy.all import get_if_list

from arplogger.capture.arp_capture import ArpCaptureHandle
from arplogger.utils.errors import CapabilityError, InterfaceError, OpenHandlesError

logger = logging.getLogger(__name__)

CAP_NET_RAW = 13

SETCAP_HINT = "Grant it with: sudo setcap cap_net_raw+eip $(readlink -f %s)" % sys.executable


def _effective_caps(status_path="/proc/self/status") -> Optional[int]:
    try:
        with open(status_path, "r") as f:
            for line in f:
                if line.startswith("CapEff:"):
                    return int(line.split()[1], 16)
    except (OSError, ValueError, IndexError):
        return None
    return None


def has_net_raw(status_path="/proc/self/status") -> bool:
    """Return True if this process may open raw packet sockets.

    When the capability set cannot be read the answer is optimistic and the
    socket open itself decides.
    """
    if os.geteuid() == 0:
        return True
    caps = _effective_caps(status_path)
    if caps is None:
        return True
    return bool(caps & (1 << CAP_NET_RAW))


def check_euid() -> bool:
    """Warn when running setuid/setgid or as root; return False in that case."""
    uid, euid = os.getuid(), os.geteuid()
    gid, egid = os.getgid(), os.getegid()
    if uid != euid or gid != egid:
        msg = "Setuid detected: uids:(%d vs %d), gids(%d vs %d)" % (uid, euid, gid, egid)
    elif uid == 0:
        msg = "This program should not be run as root."
    else:
        return True
    print("Warning: %s" % msg, file=sys.stderr)
    logger.warning(msg)
    return False


def open_handles(
    interfaces: List[str],
    handle_factory: Callable[[str], ArpCaptureHandle] = ArpCaptureHandle,
) -> Tuple[List[Tuple[str, ArpCaptureHandle]], Optional[OpenHandlesError]]:
    """Open a capture handle on each interface.

    Returns:
        (handles, error): `handles` pairs each opened interface name with its
        handle, in request order; `error` names every interface that failed,
        or is None.
    """
    available = set(get_if_list())
    privileged = has_net_raw()
    handles: List[Tuple[str, ArpCaptureHandle]] = []
    failures: Dict[str, Exception] = {}

    for name in interfaces:
        if name in failures or any(name == opened for opened, _ in handles):
            logger.warning("Interface %s listed more than once; ignoring duplicate", name)
            continue
        if name not in available:
            failures[name] = InterfaceError("no such interface: %s" % name)
            continue
        if not privileged:
            failures[name] = CapabilityError(
                "insufficient privilege to open raw socket on %s (CAP_NET_RAW). %s" % (name, SETCAP_HINT))
            continue
        try:
            handle = handle_factory(name)
        except PermissionError as e:
            failures[name] = CapabilityError("permission denied opening %s: %s. %s" % (name, e, SETCAP_HINT))
        except OSError as e:
            failures[name] = InterfaceError("cannot open %s: %s" % (name, e))
        else:
            handles.append((name, handle))

    for name, cause in failures.items():
        logger.debug("Interface %s failed: %s", name, cause)
    return handles, (OpenHandlesError(failures) if failures else None)
