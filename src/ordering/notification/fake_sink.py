"""Notification sink that records calls in memory for test assertions."""

from ordering.notification.port import NotificationSink


class RecordingNotificationSink(NotificationSink):
    def __init__(self):
        self.notifications: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _record(self, event: str, **fields) -> None:
        if not self.should_succeed:
            raise RuntimeError(self.failure_reason)
        self.notifications.append({"event": event, **fields})

    def order_placed(self, order_id, vendor_id, patron_id, total_amount) -> None:
        self._record(
            "order_placed",
            order_id=order_id,
            vendor_id=vendor_id,
            patron_id=patron_id,
            total_amount=total_amount,
        )

    def order_status_changed(self, order_id, vendor_id, previous_status, new_status) -> None:
        self._record(
            "order_status_changed",
            order_id=order_id,
            vendor_id=vendor_id,
            previous_status=previous_status,
            new_status=new_status,
        )

    def payment_status_changed(self, order_id, vendor_id, previous_status, new_status) -> None:
        self._record(
            "payment_status_changed",
            order_id=order_id,
            vendor_id=vendor_id,
            previous_status=previous_status,
            new_status=new_status,
        )

    def of_kind(self, event: str) -> list[dict]:
        return [n for n in self.notifications if n["event"] == event]

    def reset(self):
        """Clear recorded notifications (useful between tests)."""
        self.notifications.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
