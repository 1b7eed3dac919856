"""Central logger configuration for arplogger modules."""
import logging
import sys

STDERR = "-"

FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def configure(destination=STDERR, level=logging.INFO):
    """Send log records to `destination`.

    `destination` is a file path opened in append mode, or `-` for stderr.
    Raises OSError if the file cannot be opened.
    """
    if destination == STDERR:
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(destination, mode='a', encoding='utf-8')
    logging.basicConfig(level=level, format=FORMAT, handlers=[handler], force=True)
    return handler


def logs_to_stderr(destination):
    return destination == STDERR