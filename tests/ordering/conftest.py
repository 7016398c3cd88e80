from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from catalogue.lookup.fake_adapter import InMemoryProductCatalogue
from catalogue.product.product import LeadTimeUnit, Product, ProductType
from ordering.notification import set_notification_sink
from ordering.notification.fake_sink import RecordingNotificationSink
from ordering.order.order import Order
from ordering.order.service import OrderService
from protean import current_domain

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def catalogue():
    return InMemoryProductCatalogue(
        [
            Product(id="prod-bread", vendor_id="vendor-a", name="Sourdough Loaf", price=Decimal("10.00")),
            Product(id="prod-jam", vendor_id="vendor-a", name="Plum Jam", price=Decimal("6.50")),
            Product(id="prod-soap", vendor_id="vendor-b", name="Lavender Soap", price=Decimal("5.00")),
            Product(
                id="prod-bowl",
                vendor_id="vendor-c",
                name="Turned Walnut Bowl",
                price=Decimal("85.00"),
                product_type=ProductType.MADE_TO_ORDER,
                lead_time=2,
                lead_time_unit=LeadTimeUnit.WEEKS,
            ),
            Product(
                id="prod-pie",
                vendor_id="vendor-d",
                name="Saturday Apple Pie",
                price=Decimal("18.00"),
                product_type=ProductType.SCHEDULED_ORDER,
                next_available_date=date(2026, 3, 14),
                pickup_time="09:00-12:00",
            ),
            Product(id="prod-orphan", vendor_id=None, name="Unowned Candle", price=Decimal("4.00")),
            Product(
                id="prod-retired",
                vendor_id="vendor-a",
                name="Retired Rye",
                price=Decimal("8.00"),
                is_active=False,
            ),
            Product(
                id="prod-mug",
                vendor_id="vendor-b",
                name="Stoneware Mug",
                price=Decimal("22.00"),
                stock_level=3,
            ),
        ]
    )


@pytest.fixture()
def notifier():
    sink = RecordingNotificationSink()
    set_notification_sink(sink)
    return sink


@pytest.fixture()
def repository():
    return current_domain.repository_for(Order)


@pytest.fixture()
def service(catalogue):
    return OrderService(catalogue)
