"""Normalization utilities for hardware and protocol addresses.

Hardware addresses are reduced to one canonical spelling (six lowercase,
colon separated octets) so that `00-11-22-33-44-55` and `00:11:22:33:44:55`
compare equal wherever they are stored or looked up.
"""

import ipaddress
import re

from arplogger.utils.errors import ValidationError

_HEX_PAIR = r"[0-9A-Fa-f]{2}"
_HEX_QUAD = r"[0-9A-Fa-f]{4}"

# 00:11:22:33:44:55 / 00-11-22-33-44-55 (separator must be consistent)
_SEPARATED_MAC = re.compile(r"^%s([:-])%s(?:\1%s){4}$" % (_HEX_PAIR, _HEX_PAIR, _HEX_PAIR))
# 0011.2233.4455
_DOTTED_MAC = re.compile(r"^%s\.%s\.%s$" % (_HEX_QUAD, _HEX_QUAD, _HEX_QUAD))


def normalize_mac(mac):
    """Return the canonical form of a hardware address.

    Args:
        mac (str): colon, hyphen or dot separated 6-byte hardware address

    Returns:
        str: lowercase colon separated address

    Raises:
        ValidationError: if `mac` is not a valid 6-byte hardware address
    """
    if not isinstance(mac, str):
        raise ValidationError("invalid MAC address %r" % (mac,))
    text = mac.strip()
    if _SEPARATED_MAC.match(text) or _DOTTED_MAC.match(text):
        hex_only = re.sub(r"[:.-]", "", text).lower()
        return ":".join(hex_only[i:i + 2] for i in range(0, 12, 2))
    raise ValidationError("invalid MAC address %r" % (mac,))


def normalize_ip(ip):
    """Return the canonical dotted-quad form of an IPv4 address.

    Raises:
        ValidationError: if `ip` is not a valid IPv4 address
    """
    if not isinstance(ip, str):
        raise ValidationError("invalid IPv4 address %r" % (ip,))
    try:
        return str(ipaddress.IPv4Address(ip.strip()))
    except ValueError as e:
        raise ValidationError("invalid IPv4 address %r" % (ip,)) from e

