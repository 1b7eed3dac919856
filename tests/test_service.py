from arplogger.discovery.service import DiscoveryService
from arplogger.notify.sink import NotificationSink
from tests.conftest import FakeHandle


def _service(store, writer, handles):
    sink = NotificationSink(writer=writer, poll_interval=0.05)
    return DiscoveryService(store, sink, handles, poll_interval=0.05)


def test_all_workers_terminating_ends_wait(store, writer):
    handles = [
        ("eth0", FakeHandle([("00:11:22:33:44:01", "10.0.0.1")])),
        ("eth1", FakeHandle([("00:11:22:33:44:02", "10.0.1.1")])),
    ]
    with _service(store, writer, handles) as service:
        assert service.wait(timeout=5)
        assert not service.stop_event.is_set()
    assert sorted(i["mac"] for i in writer.items) == ["00:11:22:33:44:01", "00:11:22:33:44:02"]
    assert all(h.closed for _, h in handles)


def test_same_host_on_two_interfaces_recorded_at_least_once(store, writer):
    frame = ("00:11:22:33:44:55", "10.0.0.9")
    handles = [("eth0", FakeHandle([frame])), ("eth1", FakeHandle([frame]))]
    with _service(store, writer, handles) as service:
        service.wait(timeout=5)
    records = [e for e in store.entries() if e[0] == "00:11:22:33:44:55"]
    assert 1 <= len(records) <= 2
    assert 1 <= len(writer.items) <= 2


def test_failed_worker_does_not_affect_others(store, writer):
    dead = FakeHandle()
    alive = FakeHandle(hold_open=True)
    service = _service(store, writer, [("eth0", dead), ("eth1", alive)])
    service.start()
    try:
        service.workers[0].join(2)
        assert not service.workers[0].is_alive()
        assert service.workers[1].is_alive()
        alive.frames.append(("00:11:22:33:44:55", "10.0.0.1"))
        assert not service.wait(timeout=0.3)
    finally:
        service.stop()
    assert [i["mac"] for i in writer.items] == ["00:11:22:33:44:55"]
    assert alive.closed and dead.closed


def test_stop_request_shuts_everything_down(store, writer):
    handle = FakeHandle(hold_open=True)
    service = _service(store, writer, [("eth0", handle)])
    service.start()
    service.request_stop()
    assert service.wait(timeout=2)
    service.stop()
    assert not service.running()
    assert handle.closed
