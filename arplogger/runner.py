#!/usr/bin/env python3
"""
Command-line runner: listens for ARP packets on the given interface(s) and
logs every host seen for the first time.

To avoid running as root, give the interpreter raw socket capability:
    sudo setcap cap_net_raw+eip $(readlink -f $(which python3))
"""
import argparse
import logging
import signal
import sys

from arplogger import __version__
from arplogger.capture.provider import check_euid, open_handles
from arplogger.discovery.service import DiscoveryService
from arplogger.notify.sink import NotificationSink
from arplogger.storage.db import KnownHostStore
from arplogger.utils import config as cfg
from arplogger.utils import logger as log_setup
from arplogger.utils.errors import StoreIOError

logger = logging.getLogger("arplogger")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="arplogger",
        description="Listen for ARP packets to discover new hosts on the local IPv4 network")
    parser.add_argument("-i", "--interfaces", default=None,
                        help="(comma-separated list of) network interface(s) to listen on (default: eth0)")
    parser.add_argument("-l", "--logfile", default=None,
                        help="logfile path, '-' for stderr (default: /var/log/arplogger.log)")
    parser.add_argument("-d", "--database", default=None,
                        help="database path (default: /var/cache/arplogger.db)")
    parser.add_argument("-c", "--config", default=None, help="JSON configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version",
                        version="arplogger %s" % __version__)
    return parser


def fatal(config, message):
    """Log `message`, echo it to stderr unless that is the log, and exit 1."""
    if not log_setup.logs_to_stderr(config.logfile):
        print("Error: %s" % message, file=sys.stderr)
    logger.critical(message)
    sys.exit(1)


def run(config, verbose=False):
    try:
        log_setup.configure(config.logfile, logging.DEBUG if verbose else logging.INFO)
    except OSError as e:
        print("Error: cannot open logfile %s: %s" % (config.logfile, e), file=sys.stderr)
        return 1
    logger.debug("Configuration: %s", config.to_dict())

    check_euid()

    try:
        store = KnownHostStore(config.database)
        logger.info("Using database %s (%d known host(s))", config.database, len(store))
    except StoreIOError as e:
        fatal(config, "Failed to open database: %s" % e)

    handles, err = open_handles(config.interfaces)
    if err is not None:
        if not log_setup.logs_to_stderr(config.logfile):
            print("Error: Failed to open socket(s): %s" % err, file=sys.stderr)
        logger.error("Failed to open socket(s): %s", err)
        for name, cause in err.failures.items():
            logger.error("  %s: %s", name, cause)
    if not handles:
        fatal(config, "No valid interfaces found.")

    sink = NotificationSink(maxsize=config.queue_maxsize, poll_interval=config.poll_interval)
    service = DiscoveryService(store, sink, handles, poll_interval=config.poll_interval)

    def on_signal(signum, frame):
        logger.info("Received signal %d, shutting down", signum)
        service.request_stop()

    with service:
        signal.signal(signal.SIGINT, on_signal)
        signal.signal(signal.SIGTERM, on_signal)
        service.wait()
        requested = service.stop_event.is_set()
    if not requested:
        return 1
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        config = cfg.load(args.config, interfaces=args.interfaces,
                          logfile=args.logfile, database=args.database)
    except (OSError, ValueError) as e:
        print("Error: invalid configuration: %s" % e, file=sys.stderr)
        return 2
    return run(config, verbose=args.verbose)


if __name__ == '__main__':
    sys.exit(main())
