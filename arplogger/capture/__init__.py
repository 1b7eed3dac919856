"""
Capture package: ARP capture handles and the provider that opens them.
"""
from arplogger.capture.arp_capture import ArpCaptureHandle
from arplogger.capture.provider import check_euid, has_net_raw, open_handles
