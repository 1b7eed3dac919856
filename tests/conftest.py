import time

import pytest

from arplogger.storage.db import KnownHostStore


@pytest.fixture
def store(tmp_path):
    return KnownHostStore(str(tmp_path / "arplogger.db"))


class FakeHandle:
    """Capture handle that replays a fixed list of frames, then fails."""

    def __init__(self, frames=(), hold_open=False):
        self.frames = list(frames)
        self.hold_open = hold_open
        self.closed = False

    def receive(self, timeout=None):
        from arplogger.utils.errors import CaptureError

        if self.closed:
            raise CaptureError("closed")
        if self.frames:
            return self.frames.pop(0)
        if self.hold_open:
            time.sleep(0.01)
            return None
        raise CaptureError("end of capture")

    def close(self):
        self.closed = True


class ListWriter:
    def __init__(self):
        self.items = []

    def __call__(self, item):
        self.items.append(item)


@pytest.fixture
def writer():
    return ListWriter()
