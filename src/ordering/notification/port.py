"""Notification sink port — fire-and-forget hook for order lifecycle events."""

from abc import ABC, abstractmethod


class NotificationSink(ABC):
    """Abstract receiver of order lifecycle notifications."""

    @abstractmethod
    def order_placed(self, order_id: str, vendor_id: str, patron_id: str | None, total_amount: float) -> None:
        """Called after a new order has been persisted."""
        ...

    @abstractmethod
    def order_status_changed(self, order_id: str, vendor_id: str, previous_status: str, new_status: str) -> None:
        """Called after a status transition has been persisted."""
        ...

    @abstractmethod
    def payment_status_changed(self, order_id: str, vendor_id: str, previous_status: str, new_status: str) -> None:
        ...
