from arplogger.notify.sink import NotificationSink

__all__ = ["NotificationSink"]
