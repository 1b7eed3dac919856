import threading
import time

from arplogger.utils.rwlock import RWLock


def test_readers_share_the_lock():
    lock = RWLock()
    inside = threading.Barrier(2, timeout=2)
    errors = []

    def reader():
        with lock.read_locked():
            try:
                inside.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []


def test_writer_excludes_readers():
    lock = RWLock()
    events = []
    lock.acquire_write()

    def reader():
        with lock.read_locked():
            events.append("read")

    t = threading.Thread(target=reader)
    t.start()
    time.sleep(0.1)
    assert events == []
    events.append("write-done")
    lock.release_write()
    t.join(2)
    assert events == ["write-done", "read"]


def test_writer_waits_for_readers():
    lock = RWLock()
    events = []
    lock.acquire_read()

    def writer():
        with lock.write_locked():
            events.append("write")

    t = threading.Thread(target=writer)
    t.start()
    time.sleep(0.1)
    assert events == []
    lock.release_read()
    t.join(2)
    assert events == ["write"]
