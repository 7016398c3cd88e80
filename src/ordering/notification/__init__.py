"""Notification sink registry — where order lifecycle notifications are delivered.

Provides singleton access to the sink. The recording sink is used by
default; the application or a test can install another with
``set_notification_sink``.
"""

_sink = None


def get_notification_sink():
    """Return the configured sink, creating the recording sink on first use."""
    global _sink
    if _sink is None:
        from ordering.notification.fake_sink import RecordingNotificationSink

        _sink = RecordingNotificationSink()
    return _sink


def set_notification_sink(sink) -> None:
    global _sink
    _sink = sink


def reset_notification_sink() -> None:
    """Drop the configured sink (useful for testing)."""
    global _sink
    _sink = None
