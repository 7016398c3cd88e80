"""Marketplace domain — orders, their revenue split and promotional placements.

One domain holds every aggregate because the revenue endpoints read orders
and promotions inside the same request. Settings live in ``domain.toml``
next to this file: events are processed synchronously so notification
handlers run when an order is saved.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)

_initialized = False


def init_marketplace() -> Domain:
    """Register every element with the domain and initialize it once."""
    global _initialized
    if _initialized:
        return marketplace

    # Elements register themselves on import
    import ordering.notification.dispatch  # noqa: F401
    import ordering.order.events  # noqa: F401
    import ordering.order.order  # noqa: F401
    import ordering.order.repository  # noqa: F401
    import promotions.feature  # noqa: F401
    import promotions.pool.repository  # noqa: F401
    import revenue.commission  # noqa: F401

    marketplace.init(traverse=False)
    _initialized = True
    logger.info("Marketplace domain initialized", domain=marketplace.name)
    return marketplace
