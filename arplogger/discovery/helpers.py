"""Helpers shared by discovery workers and the notification sink.

Provide a single place to build the discovery description so every worker
hands the sink the same fields.
"""
from datetime import datetime
from typing import Any, Dict


def make_discovery(interface: str, mac: str, ip: str) -> Dict[str, Any]:
    """Create the description of a newly seen host.

    Args:
        interface: Interface the frame arrived on
        mac: Sender hardware address, canonical form
        ip: Sender protocol address

    Returns:
        Dictionary with `timestamp`, `interface`, `mac` and `ip`
    """
    return {
        "timestamp": datetime.now().isoformat(),
        "interface": interface,
        "mac": mac,
        "ip": ip,
    }


def format_discovery(item: Dict[str, Any]) -> str:
    return "New host discovered on %s: %s (%s)" % (item.get("interface"), item.get("mac"), item.get("ip"))
