"""
arplogger
=========

Passive ARP listener that records hosts appearing on the local IPv4
network for the first time and logs one notification per new host.
"""

__version__ = "0.3.0"
